"""
Dell service tag recognition.

Dell serial numbers ("service tags") come in a handful of short alphanumeric
shapes, plus an all-numeric 10-11 digit "express service code". Dell avoids
the letters I, O and Q so they can't be confused with 1 and 0.
"""
from __future__ import annotations

import re
from typing import Any

SERVICE_TAG_SHAPES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^[A-Z0-9]{7}$"),  # standard: ABC1234
    re.compile(r"^[A-Z0-9]{5}$"),  # older systems: AB123
    re.compile(r"^[0-9]{10,11}$"),  # express service code
    re.compile(r"^[A-Z]{1,3}[0-9]{4,5}$"),  # letter prefix
    re.compile(r"^[0-9]{1,2}[A-Z]{1,2}[0-9]{3,4}$"),  # mixed: 12AB345
    re.compile(r"^[A-Z0-9]{6}$"),
)

EXPRESS_SERVICE_CODE = re.compile(r"^[0-9]{10,11}$")

EXCLUDED_SHAPES: tuple[re.Pattern[str], ...] = (
    re.compile(r"^[0-9]+$"),
    re.compile(r"^[A-Z]+$"),
    re.compile(r"[IOQ]"),
)


def normalize_serial(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return raw.strip().upper()


def is_express_service_code(raw: Any) -> bool:
    return bool(EXPRESS_SERVICE_CODE.match(normalize_serial(raw)))


def is_dell_service_tag(raw: Any) -> bool:
    """Return True when *raw* looks like a Dell service tag or express code.

    Non-string and blank input is simply not a service tag.
    """
    tag = normalize_serial(raw)
    if not tag:
        return False
    if not any(pattern.match(tag) for pattern in SERVICE_TAG_SHAPES):
        return False
    if EXPRESS_SERVICE_CODE.match(tag):
        return True
    return not any(pattern.search(tag) for pattern in EXCLUDED_SHAPES)
