"""External collaborators: page retrieval and content extraction."""

from .base import ContentExtractor, PageRetriever, raise_if_cancelled
from .extraction import ClaudeContentExtractor, JsonPassthroughExtractor, parse_json_payload
from .mock import MockPageRetriever, fixture_key_for_location, load_fixture_documents
from .retrieval import HttpPageRetriever
from .urls import minimize_url, normalize_location

__all__ = [
    "ClaudeContentExtractor",
    "ContentExtractor",
    "HttpPageRetriever",
    "JsonPassthroughExtractor",
    "MockPageRetriever",
    "PageRetriever",
    "fixture_key_for_location",
    "load_fixture_documents",
    "minimize_url",
    "normalize_location",
    "parse_json_payload",
    "raise_if_cancelled",
]
