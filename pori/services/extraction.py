"""Content extraction: raw page content in, JSON-shaped digest value out."""

from __future__ import annotations

import json
import logging
import os
import re
import threading

import anthropic

from ..errors import ExtractionFailure
from .base import raise_if_cancelled

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"
DEFAULT_MAX_CONTENT_CHARS = 120_000
DEFAULT_MAX_TOKENS = 8192
DEFAULT_TIMEOUT_SECONDS = 60.0
_CODE_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


def parse_json_payload(text: str) -> object:
    """Parse model output as JSON, tolerating a surrounding Markdown code fence."""
    match = _CODE_FENCE_RE.match(text)
    body = match.group(1) if match else text.strip()
    try:
        return json.loads(body)
    except ValueError as exc:
        raise ExtractionFailure(f"extractor returned invalid JSON: {exc}") from exc


class JsonPassthroughExtractor:
    """Treat the retrieved content as already-extracted digest JSON."""

    def extract(self, raw_content: str, schema: dict[str, object], cancel: threading.Event) -> object:
        raise_if_cancelled(cancel)
        return parse_json_payload(raw_content)


class ClaudeContentExtractor:
    """Ask a Claude model to fill the digest schema from raw page content.

    Args:
        api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var).
        model: Model used for extraction.
        max_content_chars: Raw content beyond this many characters is dropped.
        timeout_seconds: Upper bound for one extraction request; the client never retries.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        max_content_chars: int = DEFAULT_MAX_CONTENT_CHARS,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: anthropic.Anthropic | None = None,
    ) -> None:
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._model = model
        self._max_content_chars = max(1, max_content_chars)
        self._max_tokens = max_tokens
        self._timeout = max(1.0, timeout_seconds)
        self._client = client

    def _get_client(self) -> anthropic.Anthropic:
        if self._client is None:
            self._client = anthropic.Anthropic(
                api_key=self._api_key,
                max_retries=0,
                timeout=self._timeout,
            )
        return self._client

    def _prompt(self, raw_content: str, schema: dict[str, object]) -> str:
        content = raw_content[: self._max_content_chars]
        return (
            "Extract a digest of the following web page.\n"
            "Respond with a single JSON object that validates against this JSON Schema "
            "and nothing else:\n\n"
            f"{json.dumps(schema, indent=2)}\n\n"
            "Keep entries in the order they appear on the page. Omit fields you cannot find.\n\n"
            "<page>\n"
            f"{content}\n"
            "</page>"
        )

    def extract(self, raw_content: str, schema: dict[str, object], cancel: threading.Event) -> object:
        raise_if_cancelled(cancel)
        if len(raw_content) > self._max_content_chars:
            logger.info("truncating page content from %d to %d chars", len(raw_content), self._max_content_chars)

        try:
            response = self._get_client().messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": self._prompt(raw_content, schema)}],
                timeout=self._timeout,
            )
        except anthropic.AnthropicError as e:
            raise ExtractionFailure(f"extraction request failed: {e}") from e
        raise_if_cancelled(cancel)

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text.strip():
            raise ExtractionFailure(f"extractor returned no text (stop reason: {response.stop_reason})")
        logger.debug("extraction used %s, %d output chars", self._model, len(text))
        return parse_json_payload(text)
