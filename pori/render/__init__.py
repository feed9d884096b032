"""Rendering for the session view.

Defines the render context and composes full ANSI frames from it.
Frame building is pure; only ``render_frame`` writes to the terminal.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..digest import ContentItem, Digest
from ..runtime.state import Mode
from .ansi import clip_ansi_line, display_width, strip_control_chars

APP_TITLE = " pori "
SPINNER_FRAMES: tuple[str, ...] = ("|", "/", "-", "\\")
ENTRY_ROWS = 2
SELECTED_MARKER = ">> "
UNSELECTED_MARKER = "   "

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
REVERSE = "\033[7m"
HEADER_TITLE = "\033[1;38;5;45m"
DIGEST_TITLE = "\033[1;38;5;81m"
DETAILS = "\033[38;5;34m"
SELECTED_TITLE = "\033[1;3;38;5;229m"
ERROR = "\033[38;5;203m"


@dataclass
class RenderContext:
    width: int
    height: int
    mode: Mode
    location_text: str
    fetch_in_flight: bool
    result: Digest | None
    selection_index: int | None
    list_start: int = 0
    status_message: str = ""
    status_is_error: bool = False
    spinner_frame: int = 0
    key_hint: str = ""


def body_rows(height: int) -> int:
    """Rows between the two header rows and the status line."""
    return max(1, height - 3)


def entry_rows_for_body(rows: int, has_title: bool, loading: bool) -> int:
    """Number of whole entries that fit in the body."""
    rows -= int(has_title) + int(loading)
    return max(1, rows // ENTRY_ROWS)


def build_status_line(left_text: str, width: int, right_text: str) -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def _header_line(context: RenderContext) -> str:
    location = strip_control_chars(context.location_text)
    if context.mode == Mode.NAVIGATION:
        body = f"{BOLD}Navigate:{RESET} {location}{REVERSE} {RESET}"
    else:
        body = location if location else f"{DIM}(no location){RESET}"
    return f"{HEADER_TITLE}{APP_TITLE}{RESET} {body}"


def _entry_lines(entry: ContentItem, selected: bool) -> list[str]:
    title = strip_control_chars(entry.display_title)
    details = strip_control_chars(entry.details_line())
    if selected:
        title_line = f"{SELECTED_MARKER}{SELECTED_TITLE}{title}{RESET}"
    else:
        title_line = f"{UNSELECTED_MARKER}{BOLD}{title}{RESET}"
    details_line = f"{SELECTED_MARKER if selected else UNSELECTED_MARKER}{DETAILS}{details}{RESET}"
    return [title_line, details_line]


def _body_lines(context: RenderContext, rows: int) -> list[str]:
    out: list[str] = []
    if context.fetch_in_flight:
        spinner = SPINNER_FRAMES[context.spinner_frame % len(SPINNER_FRAMES)]
        out.append(f"{BOLD}{spinner} Loading...{RESET}")

    digest = context.result
    if digest is None:
        if not context.fetch_in_flight:
            if context.mode == Mode.NAVIGATION:
                out.append(f"{DIM}Type a location and press Enter to fetch its digest.{RESET}")
            else:
                out.append(f"{DIM}No digest loaded. Press the location key to type one.{RESET}")
        return out[:rows]

    if digest.title is not None:
        out.append(f"{DIGEST_TITLE}{strip_control_chars(digest.title)}{RESET}")
    if not digest.entries:
        out.append(f"{DIM}No entries{RESET}")
        return out[:rows]

    for idx in range(max(0, context.list_start), len(digest.entries)):
        if len(out) + ENTRY_ROWS > rows:
            break
        out.extend(_entry_lines(digest.entries[idx], idx == context.selection_index))
    return out[:rows]


def _status_text(context: RenderContext) -> tuple[str, str]:
    mode_label = "NAV" if context.mode == Mode.NAVIGATION else "LIST"
    left = f" {mode_label} "
    if context.status_message:
        left += strip_control_chars(context.status_message)
    elif context.result is not None and context.result.entries:
        position = "-" if context.selection_index is None else str(context.selection_index + 1)
        left += f"{position}/{context.result.entry_count}"
    if context.mode == Mode.NAVIGATION:
        right = "Enter fetch  Esc list"
    else:
        right = context.key_hint
    return left, right


def build_frame_lines(context: RenderContext) -> list[str]:
    """Compose every screen row for one frame, clipped to the terminal width."""
    width = max(1, context.width)
    lines = [
        _header_line(context),
        f"{DIM}{'─' * width}{RESET}",
    ]
    rows = body_rows(context.height)
    body = _body_lines(context, rows)
    lines.extend(body)
    lines.extend([""] * (rows - len(body)))

    left, right = _status_text(context)
    status = build_status_line(left, width, right)
    style = ERROR if context.status_is_error and context.status_message else ""
    lines.append(f"{REVERSE}{style}{status}{RESET}")
    return [clip_ansi_line(line, width) + (RESET if "\033" in line else "") for line in lines]


def render_frame(context: RenderContext) -> None:
    """Write one composed frame to stdout."""
    out = ["\033[H\033[J", "\r\n".join(build_frame_lines(context))]
    os.write(sys.stdout.fileno(), "".join(out).encode("utf-8", errors="replace"))


def format_digest_text(digest: Digest) -> str:
    """Plain-text rendering for non-interactive output."""
    out: list[str] = []
    if digest.title is not None:
        out.append(digest.title)
        out.append("=" * max(1, display_width(digest.title)))
    if not digest.entries:
        out.append("No entries")
    for idx, entry in enumerate(digest.entries, start=1):
        out.append(f"{idx}. {entry.display_title}")
        details = entry.details_line()
        if details:
            out.append(f"   {details}")
    return "\n".join(out) + "\n"


__all__ = [
    "RenderContext",
    "body_rows",
    "build_frame_lines",
    "build_status_line",
    "entry_rows_for_body",
    "format_digest_text",
    "render_frame",
]
