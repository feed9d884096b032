"""Runtime composition layer for pori.

Builds the session state, wires the fetch coordinator and key handling into
loop callbacks, and runs the loop inside the terminal controller.
"""

from __future__ import annotations

import logging
import os
import sys
import time

from ..input import KeyBindings, ModeKeyContext, ModeKeyHandler
from ..render import render_frame
from ..services.base import ContentExtractor, PageRetriever
from .config import save_last_location
from .fetch import DEFAULT_FETCH_TIMEOUT_SECONDS, FetchCoordinator
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .session import drain_fetch, trigger_fetch
from .state import LocationBuffer, SessionState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

SPINNER_FRAME_SECONDS = 0.12
DEFAULT_POLL_INTERVAL_MS = 100


def build_session_state(initial_location: str | None) -> SessionState:
    return SessionState(location=LocationBuffer(initial_location or ""))


def run_session(
    initial_location: str | None,
    retriever: PageRetriever,
    extractor: ContentExtractor,
    *,
    timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
    bindings: KeyBindings | None = None,
    remember_location: bool = True,
) -> None:
    """Initialize session state, wire subsystems, and run the event loop."""
    if not os.isatty(sys.stdin.fileno()):
        raise SystemExit("pori needs an interactive terminal (use --print for one-shot output).")

    bindings = bindings if bindings is not None else KeyBindings()
    state = build_session_state(initial_location)
    coordinator = FetchCoordinator(retriever, extractor, timeout_seconds=timeout_seconds)
    on_success = save_last_location if remember_location else None

    key_handler = ModeKeyHandler(
        ModeKeyContext(
            state=state,
            bindings=bindings,
            trigger_fetch=lambda: trigger_fetch(state, coordinator, time.monotonic()),
        )
    )

    def drain() -> bool:
        return drain_fetch(state, coordinator, time.monotonic(), on_success)

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    logger.info("session started (location=%r)", state.location_text)
    try:
        run_main_loop(
            state,
            terminal,
            stdin_fd,
            RuntimeLoopTiming(
                poll_interval_ms=max(1, poll_interval_ms),
                spinner_frame_seconds=SPINNER_FRAME_SECONDS,
            ),
            RuntimeLoopCallbacks(
                render=render_frame,
                handle_key=key_handler.handle,
                drain_fetch=drain,
                key_hint=bindings.hint,
            ),
        )
    finally:
        coordinator.shutdown()
        logger.info("session ended")
