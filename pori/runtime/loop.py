"""Main interactive session loop.

Each iteration redraws when needed, waits a bounded time for one key, dispatches
it through the mode state machine, then drains any finished fetch. The bounded
wait keeps the drain step running even when no keys arrive.
"""

from __future__ import annotations

import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from ..render import RenderContext, body_rows, entry_rows_for_body
from .state import SessionState
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    poll_interval_ms: int
    spinner_frame_seconds: float


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``.

    Keeping the loop callback-driven isolates feature logic outside the core
    event loop and makes behavior easier to unit test.
    """

    render: Callable[[RenderContext], None]
    handle_key: Callable[[str], bool]
    drain_fetch: Callable[[], bool]
    key_hint: Callable[[], str]


def _normalize_enter(state: SessionState, key: str) -> str | None:
    """Collapse CR, LF, and CRLF into one ``ENTER`` token; ``None`` means skip."""
    if state.skip_next_lf and key == "ENTER_LF":
        state.skip_next_lf = False
        return None
    if key == "ENTER_CR":
        state.skip_next_lf = True
        return "ENTER"
    state.skip_next_lf = False
    if key == "ENTER_LF":
        return "ENTER"
    return key


def _sync_list_window(state: SessionState, rows: int) -> None:
    """Keep the selected entry inside the visible part of the list."""
    if state.result is None:
        state.list_start = 0
        return
    visible_entries = entry_rows_for_body(
        rows,
        has_title=state.result.title is not None,
        loading=state.fetch_in_flight,
    )
    new_start = state.selection.visible_start(state.list_start, visible_entries)
    if new_start != state.list_start:
        state.list_start = new_start
        state.dirty = True


def run_main_loop(
    state: SessionState,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the session loop until a quit command is processed."""
    ops = callbacks
    last_size: tuple[int, int] | None = None
    spinner_frame = 0

    with terminal.raw_mode():
        while not state.quit_requested:
            term = shutil.get_terminal_size((80, 24))
            now = time.monotonic()
            state.expire_status(now)
            if (term.columns, term.lines) != last_size:
                last_size = (term.columns, term.lines)
                state.dirty = True
            if state.fetch_in_flight:
                next_frame = int(now / timing.spinner_frame_seconds)
                if next_frame != spinner_frame:
                    spinner_frame = next_frame
                    state.dirty = True
            _sync_list_window(state, body_rows(term.lines))

            if state.dirty:
                ops.render(
                    RenderContext(
                        width=term.columns,
                        height=term.lines,
                        mode=state.mode,
                        location_text=state.location_text,
                        fetch_in_flight=state.fetch_in_flight,
                        result=state.result,
                        selection_index=state.selection_index,
                        list_start=state.list_start,
                        status_message=state.status_message,
                        status_is_error=state.last_error is not None,
                        spinner_frame=spinner_frame,
                        key_hint=ops.key_hint(),
                    )
                )
                state.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=timing.poll_interval_ms)
            except KeyboardInterrupt:
                key = ""
            normalized = _normalize_enter(state, key) if key else None
            if normalized is not None and ops.handle_key(normalized):
                break

            ops.drain_fetch()
