"""Input-layer public API for key decoding and mode handlers.

Low-level terminal decoding (`read_key`) is kept apart from the mode state
machine used by the session loop.
"""

from .key_modes import KeyBindings, ModeKeyContext, ModeKeyHandler
from .key_registry import KeyComboBinding, KeyComboRegistry
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyBindings",
    "KeyComboBinding",
    "KeyComboRegistry",
    "ModeKeyContext",
    "ModeKeyHandler",
]
