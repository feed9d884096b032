"""Command-line front door for pori.

Parses CLI options, configures logging, resolves config defaults, and picks the
retrieval/extraction services. Then dispatches into the interactive session or
prints a single digest.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .input import KeyBindings
from .logging_utils import configure_logging
from .render import format_digest_text
from .runtime import run_session
from .runtime.config import (
    load_fetch_timeout_seconds,
    load_key_overrides,
    load_last_location,
    load_model_name,
    load_poll_interval_ms,
)
from .runtime.fetch import DEFAULT_FETCH_TIMEOUT_SECONDS, FetchCoordinator
from .services import (
    ClaudeContentExtractor,
    ContentExtractor,
    HttpPageRetriever,
    JsonPassthroughExtractor,
    MockPageRetriever,
    PageRetriever,
)
from .services.retrieval import DEFAULT_TIMEOUT_SECONDS as HTTP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_services(
    use_mock: bool,
    model: str,
    timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
) -> tuple[PageRetriever, ContentExtractor]:
    """Return offline fixture services or the live HTTP + Claude pair.

    Live services get request timeouts no longer than the fetch deadline.
    """
    if not use_mock and not os.environ.get("ANTHROPIC_API_KEY"):
        logger.warning("ANTHROPIC_API_KEY is not set; using offline fixtures")
        use_mock = True
    if use_mock:
        return MockPageRetriever(), JsonPassthroughExtractor()
    return (
        HttpPageRetriever(timeout_seconds=min(HTTP_TIMEOUT_SECONDS, timeout_seconds)),
        ClaudeContentExtractor(model=model, timeout_seconds=timeout_seconds),
    )


def print_digest(
    location: str,
    retriever: PageRetriever,
    extractor: ContentExtractor,
    timeout_seconds: float,
) -> None:
    """Fetch one digest through the coordinator and write it to stdout."""
    coordinator = FetchCoordinator(retriever, extractor, timeout_seconds=timeout_seconds)
    coordinator.launch(location)
    outcome = coordinator.wait()
    if outcome is None or not outcome.ok or outcome.digest is None:
        error = outcome.error if outcome is not None else None
        raise SystemExit(error.status_text() if error is not None else "fetch failed")
    sys.stdout.write(format_digest_text(outcome.digest))


def main() -> None:
    """Parse CLI arguments and launch pori."""
    parser = argparse.ArgumentParser(
        description="Browse a structured digest of a web page in the terminal."
    )
    parser.add_argument(
        "location",
        nargs="?",
        default=None,
        help="Location to start with. Defaults to the last fetched location.",
    )
    parser.add_argument("--mock", action="store_true", help="Use bundled offline digests instead of the network.")
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Seconds before a fetch is abandoned (default: config or 60).",
    )
    parser.add_argument("--model", default=None, help="Model used for content extraction.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug details.")
    parser.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Fetch LOCATION once, print the digest as text, and exit.",
    )
    args = parser.parse_args()

    configure_logging(args.log_file, verbose=args.verbose)

    timeout_seconds = args.timeout if args.timeout is not None else load_fetch_timeout_seconds()
    model = args.model or load_model_name()
    location = args.location if args.location is not None else load_last_location()
    retriever, extractor = build_services(args.mock, model, timeout_seconds)

    if args.print_only:
        if not location:
            raise SystemExit("--print needs a location.")
        print_digest(location, retriever, extractor, timeout_seconds)
        return

    run_session(
        location,
        retriever,
        extractor,
        timeout_seconds=timeout_seconds,
        poll_interval_ms=load_poll_interval_ms(),
        bindings=KeyBindings.from_overrides(load_key_overrides()),
        remember_location=not args.mock,
    )


if __name__ == "__main__":
    main()
