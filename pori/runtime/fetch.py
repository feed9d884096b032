"""Background fetch coordinator.

Runs retrieve -> extract -> decode on a daemon worker thread and hands exactly one
outcome back through a queue. ``launch`` and ``poll`` are called only from the
session loop thread; the worker never touches session state.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from queue import Empty, Queue

from ..digest import DIGEST_JSON_SCHEMA, Digest, DigestDecoder, default_decoder
from ..errors import (
    DigestDecodeError,
    ExtractionFailure,
    FetchFailure,
    FetchInFlightError,
    FetchTimeout,
    NoLocationSet,
    RetrievalFailure,
)
from ..services.base import ContentExtractor, PageRetriever

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS = 60.0
WAIT_POLL_SECONDS = 0.02


@dataclass(frozen=True)
class FetchRequest:
    """One launched fetch and the token used to abandon it."""

    request_id: int
    location: str
    started_at: float
    deadline: float
    cancel: threading.Event = field(default_factory=threading.Event, compare=False)


@dataclass(frozen=True)
class FetchOutcome:
    """The single message a fetch posts: a digest or a failure."""

    request_id: int
    location: str
    digest: Digest | None = None
    error: FetchFailure | None = None
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and self.digest is not None


class FetchCoordinator:
    """Launch at most one fetch at a time and deliver its outcome without blocking."""

    def __init__(
        self,
        retriever: PageRetriever,
        extractor: ContentExtractor,
        *,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        decoder: DigestDecoder | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._retriever = retriever
        self._extractor = extractor
        self._timeout_seconds = max(0.001, timeout_seconds)
        self._decoder = decoder if decoder is not None else default_decoder()
        self._clock = clock
        self._next_request_id = 1
        self._active: FetchRequest | None = None
        self._results: Queue[FetchOutcome] = Queue()

    @property
    def in_flight(self) -> bool:
        return self._active is not None

    @property
    def active_request(self) -> FetchRequest | None:
        return self._active

    def launch(self, location: str) -> int:
        """Start a fetch for ``location`` and return its request id immediately."""
        if self._active is not None:
            raise FetchInFlightError(f"fetch {self._active.request_id} is still in flight")

        now = self._clock()
        request = FetchRequest(
            request_id=self._next_request_id,
            location=location,
            started_at=now,
            deadline=now + self._timeout_seconds,
        )
        self._next_request_id += 1
        self._active = request

        if not location.strip():
            self._results.put(
                FetchOutcome(
                    request_id=request.request_id,
                    location=location,
                    error=NoLocationSet(location=location),
                )
            )
            return request.request_id

        logger.info("fetch %d launched for %s", request.request_id, location)
        worker = threading.Thread(
            target=self._worker,
            args=(request,),
            name=f"pori-fetch-{request.request_id}",
            daemon=True,
        )
        worker.start()
        return request.request_id

    def _fetch_digest(self, request: FetchRequest) -> Digest:
        try:
            raw = self._retriever.retrieve(request.location, request.cancel)
        except FetchFailure:
            raise
        except Exception as e:
            raise RetrievalFailure(str(e) or type(e).__name__, request.location) from e

        try:
            value = self._extractor.extract(raw, DIGEST_JSON_SCHEMA, request.cancel)
        except FetchFailure:
            raise
        except Exception as e:
            raise ExtractionFailure(str(e) or type(e).__name__, request.location) from e

        try:
            return self._decoder.decode(value)
        except DigestDecodeError as e:
            raise ExtractionFailure(str(e), request.location) from e

    def _worker(self, request: FetchRequest) -> None:
        digest: Digest | None = None
        error: FetchFailure | None = None
        try:
            digest = self._fetch_digest(request)
        except FetchFailure as e:
            if e.location is None:
                e.location = request.location
            error = e
        except Exception as e:
            logger.exception("fetch %d crashed", request.request_id)
            error = ExtractionFailure(f"unexpected error: {e}", request.location)

        if request.cancel.is_set():
            logger.info("fetch %d finished after being abandoned; dropping outcome", request.request_id)
            return
        self._results.put(
            FetchOutcome(
                request_id=request.request_id,
                location=request.location,
                digest=digest,
                error=error,
                elapsed_seconds=self._clock() - request.started_at,
            )
        )

    def poll(self) -> FetchOutcome | None:
        """Return the active fetch's outcome if it is ready, without blocking.

        Outcomes from abandoned requests are discarded. When the active request
        has passed its deadline it is cancelled and reported as a timeout.
        """
        active = self._active
        while True:
            try:
                outcome = self._results.get_nowait()
            except Empty:
                break
            if active is not None and outcome.request_id == active.request_id:
                self._active = None
                self._log_outcome(outcome)
                return outcome
            logger.debug("discarding stale outcome for fetch %d", outcome.request_id)

        if active is None:
            return None
        now = self._clock()
        if now < active.deadline:
            return None

        active.cancel.set()
        self._active = None
        outcome = FetchOutcome(
            request_id=active.request_id,
            location=active.location,
            error=FetchTimeout(f"no result after {self._timeout_seconds:g}s", active.location),
            elapsed_seconds=now - active.started_at,
        )
        self._log_outcome(outcome)
        return outcome

    def wait(self, timeout_seconds: float | None = None) -> FetchOutcome | None:
        """Block until the active fetch resolves; used by non-interactive mode."""
        give_up_at = None if timeout_seconds is None else self._clock() + timeout_seconds
        while self._active is not None:
            outcome = self.poll()
            if outcome is not None:
                return outcome
            if give_up_at is not None and self._clock() >= give_up_at:
                return None
            time.sleep(WAIT_POLL_SECONDS)
        return None

    def shutdown(self) -> None:
        """Abandon any outstanding fetch without waiting for its worker."""
        active = self._active
        if active is None:
            return
        logger.info("abandoning fetch %d on shutdown", active.request_id)
        active.cancel.set()
        self._active = None

    def _log_outcome(self, outcome: FetchOutcome) -> None:
        if outcome.ok and outcome.digest is not None:
            logger.info(
                "fetch %d succeeded in %.2fs with %d entries",
                outcome.request_id,
                outcome.elapsed_seconds,
                outcome.digest.entry_count,
            )
        else:
            logger.warning("fetch %d failed: %s", outcome.request_id, outcome.error)


__all__ = [
    "DEFAULT_FETCH_TIMEOUT_SECONDS",
    "FetchCoordinator",
    "FetchOutcome",
    "FetchRequest",
]
