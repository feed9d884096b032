"""Collaborator contracts consumed by the fetch coordinator.

Both services are synchronous callables run on the coordinator's worker thread.
They receive a cancellation token and should stop early once it is set.
"""

from __future__ import annotations

import threading
from typing import Protocol

from ..errors import FetchCancelled


class PageRetriever(Protocol):
    def retrieve(self, location: str, cancel: threading.Event) -> str:
        """Return raw page content for ``location`` or raise ``RetrievalFailure``."""
        ...


class ContentExtractor(Protocol):
    def extract(self, raw_content: str, schema: dict[str, object], cancel: threading.Event) -> object:
        """Return a JSON-shaped digest value or raise ``ExtractionFailure``."""
        ...


def raise_if_cancelled(cancel: threading.Event, location: str | None = None) -> None:
    """Abort the current service call when the coordinator gave up on it."""
    if cancel.is_set():
        raise FetchCancelled("cancelled", location)
