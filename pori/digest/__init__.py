"""Digest result model, its JSON schema, and the tolerant decoder."""

from .decode import DigestDecoder, decode_digest, decode_digest_text, default_decoder
from .model import UNTITLED, Author, ContentItem, Digest
from .schema import DIGEST_JSON_SCHEMA

__all__ = [
    "Author",
    "ContentItem",
    "Digest",
    "DigestDecoder",
    "DIGEST_JSON_SCHEMA",
    "UNTITLED",
    "decode_digest",
    "decode_digest_text",
    "default_decoder",
]
