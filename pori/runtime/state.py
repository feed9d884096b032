"""Session state owned and mutated only by the session loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..digest import Digest
from ..errors import FetchFailure
from .selection import ListSelection


class Mode(Enum):
    """How keystrokes are interpreted."""

    NAVIGATION = "navigation"
    INTERACTION = "interaction"


class LocationBuffer:
    """Editable location text; the empty string is a valid value."""

    def __init__(self, text: str = "") -> None:
        self.text = text

    def append(self, ch: str) -> None:
        self.text += ch

    def remove_last(self) -> None:
        if self.text:
            self.text = self.text[:-1]

    def clear(self) -> None:
        self.text = ""

    def snapshot(self) -> str:
        """Copy handed to the fetch worker; later edits never reach it."""
        return str(self.text)


@dataclass
class SessionState:
    mode: Mode = Mode.NAVIGATION
    location: LocationBuffer = field(default_factory=LocationBuffer)
    fetch_in_flight: bool = False
    fetch_started_at: float = 0.0
    result: Digest | None = None
    selection: ListSelection = field(default_factory=ListSelection)
    list_start: int = 0
    status_message: str = ""
    status_message_until: float = 0.0
    last_error: FetchFailure | None = None
    dirty: bool = True
    skip_next_lf: bool = False
    quit_requested: bool = False

    @property
    def location_text(self) -> str:
        return self.location.text

    @property
    def selection_index(self) -> int | None:
        return self.selection.index if self.result is not None else None

    def set_mode(self, mode: Mode) -> None:
        if mode != self.mode:
            self.mode = mode
            self.dirty = True

    def set_status(self, message: str, now: float, seconds: float) -> None:
        self.status_message = message
        self.status_message_until = now + seconds
        self.dirty = True

    def expire_status(self, now: float) -> None:
        if self.status_message and now >= self.status_message_until:
            self.status_message = ""
            self.status_message_until = 0.0
            self.dirty = True

    def replace_result(self, digest: Digest) -> None:
        """Swap in a new digest wholesale and drop the old selection."""
        self.result = digest
        self.selection.reset(digest.entry_count)
        self.list_start = 0
        self.dirty = True
