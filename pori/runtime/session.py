"""Session-level fetch operations: gated trigger and non-blocking drain.

Both run on the session loop thread, which is the only writer of ``SessionState``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..services.urls import minimize_url
from .fetch import FetchCoordinator, FetchOutcome
from .state import Mode, SessionState

logger = logging.getLogger(__name__)

STATUS_SECONDS = 4.0
ERROR_STATUS_SECONDS = 8.0


def trigger_fetch(state: SessionState, coordinator: FetchCoordinator, now: float) -> bool:
    """Launch a fetch for the current location unless one is already in flight.

    Returns ``True`` when a fetch was launched. The in-flight flag is set before
    returning so a second trigger in the same iteration is ignored. Launching
    also clears the previous failure so later status text is not shown as an error.
    """
    if state.fetch_in_flight or coordinator.in_flight:
        logger.debug("ignoring fetch trigger while a fetch is in flight")
        state.set_status("Fetch already in progress", now, STATUS_SECONDS)
        return False
    state.fetch_in_flight = True
    state.fetch_started_at = now
    state.last_error = None
    state.dirty = True
    coordinator.launch(state.location.snapshot())
    return True


def apply_fetch_outcome(
    state: SessionState,
    outcome: FetchOutcome,
    now: float,
    on_success: Callable[[str], None] | None = None,
) -> None:
    """Fold one fetch outcome into session state.

    Success replaces the result wholesale and switches to interaction mode.
    Failure keeps the previous result, selection, and mode untouched.
    """
    state.fetch_in_flight = False
    state.dirty = True
    if outcome.ok and outcome.digest is not None:
        state.replace_result(outcome.digest)
        state.last_error = None
        state.set_mode(Mode.INTERACTION)
        count = outcome.digest.entry_count
        noun = "entry" if count == 1 else "entries"
        state.set_status(f"Loaded {count} {noun} from {minimize_url(outcome.location)}", now, STATUS_SECONDS)
        if on_success is not None:
            on_success(outcome.location)
        return

    state.last_error = outcome.error
    message = outcome.error.status_text() if outcome.error is not None else "fetch failed"
    state.set_status(message, now, ERROR_STATUS_SECONDS)


def drain_fetch(
    state: SessionState,
    coordinator: FetchCoordinator,
    now: float,
    on_success: Callable[[str], None] | None = None,
) -> bool:
    """Consume at most one ready outcome; return whether state changed."""
    outcome = coordinator.poll()
    if outcome is None:
        return False
    apply_fetch_outcome(state, outcome, now, on_success)
    return True
