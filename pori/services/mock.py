"""Offline page retrieval backed by bundled digest fixtures.

Used by ``--mock`` and whenever no extraction credentials are configured, so the
interface can be exercised without network access. The fixtures are digest JSON
in both envelope shapes and pair with ``JsonPassthroughExtractor``.
"""

from __future__ import annotations

import json
import logging
import threading
from importlib import resources

from ..errors import RetrievalFailure
from .base import raise_if_cancelled

logger = logging.getLogger(__name__)

FIXTURE_PACKAGE = "pori.services.fixtures"
FIXTURE_FILENAME = "test_digests.json"
DEFAULT_KEY = "hacker_news"

# First matching substring wins.
_LOCATION_PATTERNS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("news.ycombinator", "hackernews", "hn"), "hacker_news"),
    (("reddit",), "reddit_programming"),
    (("blog", "tech"), "tech_blog"),
    (("minimal",), "minimal"),
    (("empty",), "empty"),
)


def load_fixture_documents() -> dict[str, str]:
    """Load every fixture as its own serialized JSON document."""
    text = resources.files(FIXTURE_PACKAGE).joinpath(FIXTURE_FILENAME).read_text(encoding="utf-8")
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"{FIXTURE_FILENAME} must contain a JSON object")
    return {str(key): json.dumps(value) for key, value in data.items()}


def fixture_key_for_location(location: str) -> str:
    lowered = location.lower()
    for needles, key in _LOCATION_PATTERNS:
        if any(needle in lowered for needle in needles):
            return key
    return DEFAULT_KEY


class MockPageRetriever:
    """Serve fixture JSON chosen by location pattern instead of fetching a page."""

    def __init__(self, documents: dict[str, str] | None = None, delay_seconds: float = 0.0) -> None:
        self._documents = documents if documents is not None else load_fixture_documents()
        self._delay_seconds = max(0.0, delay_seconds)

    def available_keys(self) -> list[str]:
        return sorted(self._documents)

    def get_by_key(self, key: str) -> str:
        try:
            return self._documents[key]
        except KeyError:
            raise RetrievalFailure(f"no test data found for key: {key}") from None

    def retrieve(self, location: str, cancel: threading.Event) -> str:
        raise_if_cancelled(cancel, location)
        if self._delay_seconds and cancel.wait(self._delay_seconds):
            raise_if_cancelled(cancel, location)
        key = fixture_key_for_location(location)
        logger.debug("mock retrieval for %r uses fixture %s", location, key)
        return self.get_by_key(key)
