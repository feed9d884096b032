"""Cursor over the current digest's entries with wraparound at both ends."""

from __future__ import annotations


class ListSelection:
    """Selected row index over ``count`` entries; ``None`` means nothing selected."""

    def __init__(self, count: int = 0) -> None:
        self.count = max(0, count)
        self.index: int | None = None

    def reset(self, count: int) -> None:
        """Forget the selection; used whenever the underlying list is replaced."""
        self.count = max(0, count)
        self.index = None

    def select_next(self) -> None:
        if self.count == 0:
            return
        if self.index is None:
            self.index = 0
            return
        self.index = (self.index + 1) % self.count

    def select_previous(self) -> None:
        if self.count == 0:
            return
        if self.index is None:
            self.index = self.count - 1
            return
        self.index = (self.index - 1) % self.count

    def visible_start(self, current_start: int, rows: int) -> int:
        """Return a list scroll offset that keeps the selected row on screen."""
        rows = max(1, rows)
        max_start = max(0, self.count - rows)
        start = max(0, min(current_start, max_start))
        if self.index is None:
            return start
        if self.index < start:
            return self.index
        if self.index >= start + rows:
            return self.index - rows + 1
        return start
