"""Failure types raised by services and reported by the fetch coordinator.

None of these are fatal: the coordinator converts them into failure messages
and the session surfaces them as transient status text.
"""

from __future__ import annotations


class FetchFailure(Exception):
    """Base class for every failure a fetch can report back to the session."""

    kind = "fetch"

    def __init__(self, message: str, location: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location

    def status_text(self) -> str:
        """Short one-line description for the status bar."""
        return f"{self.kind} failed: {self.message}"


class RetrievalFailure(FetchFailure):
    """The page-retrieval service could not produce content."""

    kind = "retrieval"


class ExtractionFailure(FetchFailure):
    """Extraction failed or returned something that is not a digest."""

    kind = "extraction"


class NoLocationSet(FetchFailure):
    """A fetch was triggered with an empty location."""

    kind = "location"

    def __init__(self, message: str = "no location set", location: str | None = None) -> None:
        super().__init__(message, location)

    def status_text(self) -> str:
        return "Type a location first, then press Enter"


class FetchTimeout(FetchFailure):
    """The fetch did not finish before the coordinator deadline."""

    kind = "fetch"

    def status_text(self) -> str:
        return f"timed out: {self.message}"


class FetchCancelled(FetchFailure):
    """A service noticed its cancellation token and stopped early."""

    kind = "fetch"


class FetchInFlightError(RuntimeError):
    """``launch`` was called while another fetch is still outstanding."""


class DigestDecodeError(ValueError):
    """A JSON value matched neither accepted digest envelope shape."""
