"""Persistent JSON config helpers.

Stores loop timing, fetch timeout, extraction model, key overrides, and the
last successfully fetched location. Malformed or missing config falls back to
defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from ..services.extraction import DEFAULT_MODEL

logger = logging.getLogger(__name__)

APP_NAME = "pori"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_POLL_INTERVAL_MS = 100
MIN_POLL_INTERVAL_MS = 10
MAX_POLL_INTERVAL_MS = 1000
DEFAULT_FETCH_TIMEOUT_SECONDS = 60.0
KEY_ACTIONS = ("next", "previous", "refresh", "navigate", "quit")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as e:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, e)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is logged and ignored to keep runtime
    behavior non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as e:
        logger.warning("could not write config %s: %s", CONFIG_PATH, e)


def load_poll_interval_ms() -> int:
    """Return the bounded input wait, clamped to a sane non-zero range."""
    value = load_config().get("poll_interval_ms")
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_POLL_INTERVAL_MS
    return max(MIN_POLL_INTERVAL_MS, min(MAX_POLL_INTERVAL_MS, value))


def load_fetch_timeout_seconds() -> float:
    value = load_config().get("fetch_timeout_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return DEFAULT_FETCH_TIMEOUT_SECONDS
    return float(value)


def load_model_name() -> str:
    value = load_config().get("model")
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_MODEL
    return value.strip()


def load_key_overrides() -> dict[str, str]:
    """Load interaction-key overrides.

    Unknown actions and values that are not a single printable, non-space
    character are dropped.
    """
    value = load_config().get("keys")
    if not isinstance(value, dict):
        return {}
    overrides: dict[str, str] = {}
    for action, key in value.items():
        if action not in KEY_ACTIONS:
            continue
        if not isinstance(key, str) or len(key) != 1 or not key.isprintable() or key.isspace():
            continue
        overrides[action] = key
    return overrides


def load_last_location() -> str | None:
    value = load_config().get("last_location")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def save_last_location(location: str) -> None:
    """Remember the last successfully fetched location."""
    stripped = str(location).strip()
    if not stripped:
        return
    config = load_config()
    if config.get("last_location") == stripped:
        return
    config["last_location"] = stripped
    save_config(config)
