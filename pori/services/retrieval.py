"""HTTP page retrieval backed by httpx."""

from __future__ import annotations

import logging
import threading

import httpx

from ..errors import RetrievalFailure
from .base import raise_if_cancelled
from .urls import normalize_location

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_MAX_BYTES = 2_000_000
USER_AGENT = "pori/0.1 (+terminal digest reader)"


class HttpPageRetriever:
    """Fetch a page body as text.

    The body is streamed so the cancellation token is honored between chunks
    and oversized pages are cut at ``max_bytes`` instead of read fully.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_bytes: int = DEFAULT_MAX_BYTES,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._max_bytes = max(1, max_bytes)
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            follow_redirects=True,
            timeout=self._timeout,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        )

    def retrieve(self, location: str, cancel: threading.Event) -> str:
        url = normalize_location(location)
        if not url:
            raise RetrievalFailure("empty location", location)
        raise_if_cancelled(cancel, location)

        chunks: list[bytes] = []
        size = 0
        truncated = False
        try:
            with self._client() as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    for chunk in response.iter_bytes():
                        raise_if_cancelled(cancel, location)
                        chunks.append(chunk)
                        size += len(chunk)
                        if size >= self._max_bytes:
                            truncated = True
                            break
                    encoding = response.charset_encoding or "utf-8"
        except httpx.HTTPStatusError as e:
            raise RetrievalFailure(f"HTTP {e.response.status_code} from {url}", location) from e
        except httpx.RequestError as e:
            raise RetrievalFailure(f"network error: {e}", location) from e

        body = b"".join(chunks)[: self._max_bytes]
        if truncated:
            logger.info("truncated %s at %d bytes", url, self._max_bytes)
        logger.debug("retrieved %d bytes from %s", len(body), url)
        try:
            return body.decode(encoding, errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")
