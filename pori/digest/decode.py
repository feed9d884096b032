"""Tolerant decoding of extraction output into a ``Digest``.

The extraction service may return the digest object at the top level or wrapped
under a ``"digest"`` key. Both shapes are accepted; the decoder counts which one
it sees so the unused branch can be retired once the upstream shape settles.
"""

from __future__ import annotations

import json
import logging
import threading
import warnings
from collections.abc import Mapping

from pydantic import ValidationError

from ..errors import DigestDecodeError
from .model import Digest

logger = logging.getLogger(__name__)

ENVELOPE_KEY = "digest"
SHAPE_WRAPPED = "wrapped"
SHAPE_BARE = "bare"
DEFAULT_STABLE_AFTER = 50


class DigestDecoder:
    """Decode either envelope shape and flag the shape once it looks stable."""

    def __init__(self, stable_after: int = DEFAULT_STABLE_AFTER) -> None:
        self.stable_after = max(1, stable_after)
        self._lock = threading.Lock()
        self._shape_counts: dict[str, int] = {SHAPE_WRAPPED: 0, SHAPE_BARE: 0}
        self._stability_reported = False

    @property
    def shape_counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._shape_counts)

    def decode(self, value: object) -> Digest:
        """Decode ``value`` from the wrapped shape when present, else the bare shape.

        A present ``"digest"`` key always wins: a malformed nested value is an
        error and does not fall back to decoding the outer object.
        """
        if isinstance(value, Mapping) and ENVELOPE_KEY in value:
            shape = SHAPE_WRAPPED
            payload = value[ENVELOPE_KEY]
        else:
            shape = SHAPE_BARE
            payload = value

        try:
            digest = Digest.model_validate(payload)
        except ValidationError as exc:
            raise DigestDecodeError(
                f"{shape} digest does not match schema ({exc.error_count()} errors): {_first_error(exc)}"
            ) from exc

        logger.debug("decoded %s digest with %d entries", shape, digest.entry_count)
        self._record_shape(shape)
        return digest

    def decode_text(self, text: str) -> Digest:
        """Parse JSON text, then decode it like :meth:`decode`."""
        try:
            value = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise DigestDecodeError(f"invalid JSON: {exc}") from exc
        return self.decode(value)

    def _record_shape(self, shape: str) -> None:
        with self._lock:
            self._shape_counts[shape] += 1
            if self._stability_reported:
                return
            other = SHAPE_BARE if shape == SHAPE_WRAPPED else SHAPE_WRAPPED
            if self._shape_counts[shape] < self.stable_after or self._shape_counts[other] != 0:
                return
            self._stability_reported = True

        message = (
            f"extraction output has used the {shape} digest shape {self.stable_after} times "
            f"and never the {other} shape; the {other} branch of the decoder is a candidate for removal"
        )
        logger.info(message)
        warnings.warn(message, DeprecationWarning, stacklevel=3)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    where = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    return f"{where}: {first.get('msg', 'invalid')}"


_DEFAULT_DECODER = DigestDecoder()


def default_decoder() -> DigestDecoder:
    return _DEFAULT_DECODER


def decode_digest(value: object) -> Digest:
    """Decode a JSON-shaped value with the shared default decoder."""
    return _DEFAULT_DECODER.decode(value)


def decode_digest_text(text: str) -> Digest:
    """Decode JSON text with the shared default decoder."""
    return _DEFAULT_DECODER.decode_text(text)
