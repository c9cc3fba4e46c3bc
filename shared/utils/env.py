from __future__ import annotations

import os


UNSET_SENTINELS = {
    "",
    "none",
    "not_available",
    "n/a",
    "na",
    "null",
    "undefined",
}

TRUTHY = {"1", "true", "yes", "on"}


def env_value(name: str, default: str | None = None) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    if value.lower() in UNSET_SENTINELS:
        return default
    return value


def env_bool(name: str, default: bool) -> bool:
    raw = env_value(name)
    if raw is None:
        return default
    return raw.lower() in TRUTHY


def env_int(name: str, default: int) -> int:
    raw = env_value(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = env_value(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default
