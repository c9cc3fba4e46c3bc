"""
Terminal panels for the asset sync CLI: ANSI colors, boxed key-value panels,
and text wrapping.
"""
from __future__ import annotations

import shutil
import sys
import textwrap
from typing import Any, Iterable

from shared.utils.env import env_value


class Ansi:
    RESET = "\033[0m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BLUE = "\033[34m"


def color_enabled() -> bool:
    force = (env_value("ASSET_SYNC_FORCE_COLOR", "auto") or "auto").lower()
    if force in {"0", "false", "no"}:
        return False
    return force in {"1", "true", "yes"} or sys.stdout.isatty()


def color(text: str, color_code: str) -> str:
    if not color_enabled():
        return text
    return f"{color_code}{text}{Ansi.RESET}"


def terminal_width() -> int:
    width = shutil.get_terminal_size((120, 20)).columns
    return max(72, min(width, 140))


def wrap_text(text: str, width: int) -> list[str]:
    result: list[str] = []
    for raw_line in str(text).splitlines() or [""]:
        result.extend(textwrap.wrap(raw_line, width=width) or [""])
    return result


def wrap_row(label: str, value: Any, width: int) -> list[str]:
    """Format ``label: value`` with continuation-indent wrapping."""
    prefix = f"{label}: "
    available = max(12, width - len(prefix))
    chunks = wrap_text(str(value), available)
    indent = " " * len(prefix)
    return [f"{prefix}{chunks[0]}", *(f"{indent}{extra}" for extra in chunks[1:])]


def render_box(title: str, body_lines: Iterable[str], width: int | None = None) -> list[str]:
    """Render *body_lines* inside a Unicode box titled *title* (uncolored)."""
    lines = list(body_lines)
    max_w = (width or terminal_width()) - 4
    title_text = f" {title} "
    content_w = max(len(title_text), max((len(line) for line in lines), default=0), 36)
    content_w = min(content_w, max_w)

    normalized: list[str] = []
    for line in lines:
        normalized.extend([line] if len(line) <= content_w else textwrap.wrap(line, width=content_w))

    top = f"╭─{title_text}{'─' * (content_w - len(title_text))}╮"
    bottom = f"╰{'─' * (content_w + 1)}╯"
    return [top, *(f"│ {line.ljust(content_w)}│" for line in normalized), bottom]


def print_panel(title: str, rows: list[tuple[str, Any]], color_code: str) -> None:
    width = terminal_width()
    body: list[str] = []
    for label, value in rows:
        body.extend(wrap_row(label, value, width - 6))
    print("")
    print("\n".join(color(line, color_code) for line in render_box(title, body, width)))
