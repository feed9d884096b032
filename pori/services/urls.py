"""Location string helpers shared by services and the display surface."""

from __future__ import annotations

from urllib.parse import urlparse

DEFAULT_SCHEME = "https"


def normalize_location(location: str) -> str:
    """Return an absolute http(s) URL, assuming ``https://`` for bare hosts."""
    stripped = location.strip()
    if not stripped:
        return stripped
    parsed = urlparse(stripped)
    if parsed.scheme in {"http", "https"} and parsed.netloc:
        return stripped
    return f"{DEFAULT_SCHEME}://{stripped.lstrip('/')}"


def minimize_url(full_url: str) -> str:
    """Return just the host part of ``full_url``, or the input when there is none."""
    parts = full_url.split("/")
    if len(parts) > 2 and parts[2]:
        return parts[2]
    return full_url
