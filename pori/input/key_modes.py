"""Mode state machine: how one key token is interpreted in each mode.

Navigation edits the location text; interaction drives the entry list and
commands. Unbound keys are ignored in both modes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields

from ..runtime.state import Mode, SessionState
from .key_registry import KeyComboBinding, KeyComboRegistry


@dataclass(frozen=True)
class KeyBindings:
    """Interaction-mode command keys."""

    next: str = "j"
    previous: str = "k"
    refresh: str = "r"
    navigate: str = "/"
    quit: str = "q"

    @classmethod
    def from_overrides(cls, overrides: dict[str, str]) -> KeyBindings:
        """Apply per-action overrides, dropping ones that collide in the result.

        Collisions are judged on the final mapping, so swapping two keys works.
        An override that still shares a key with another action reverts to its
        default; defaults never collide, so this settles.
        """
        defaults = {f.name: getattr(cls(), f.name) for f in fields(cls)}
        applied = {action: key for action, key in overrides.items() if action in defaults}
        while True:
            values = {**defaults, **applied}
            owners: dict[str, list[str]] = {}
            for action, key in values.items():
                owners.setdefault(key, []).append(action)
            clashing = {
                action
                for actions in owners.values()
                if len(actions) > 1
                for action in actions
                if action in applied
            }
            if not clashing:
                return cls(**values)
            for action in clashing:
                del applied[action]

    def hint(self) -> str:
        return (
            f"{self.next}/{self.previous} move  {self.refresh} refresh  "
            f"{self.navigate} location  {self.quit} quit"
        )


@dataclass(frozen=True)
class ModeKeyContext:
    """State and bound operations required for mode-aware key handling."""

    state: SessionState
    bindings: KeyBindings
    trigger_fetch: Callable[[], bool]


class ModeKeyHandler:
    """Dispatch keys through per-mode registries built once per context."""

    def __init__(self, context: ModeKeyContext) -> None:
        self.context = context
        self._navigation = self._navigation_registry()
        self._interaction = self._interaction_registry()

    def _navigation_registry(self) -> KeyComboRegistry:
        state = self.context.state

        def remove_last() -> bool:
            if state.location.text:
                state.location.remove_last()
                state.dirty = True
            return False

        def clear_location() -> bool:
            if state.location.text:
                state.location.clear()
                state.dirty = True
            return False

        def to_interaction() -> bool:
            state.set_mode(Mode.INTERACTION)
            return False

        def submit() -> bool:
            self.context.trigger_fetch()
            return False

        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("BACKSPACE",), remove_last),
            KeyComboBinding(("CTRL_U",), clear_location),
            KeyComboBinding(("ESC",), to_interaction),
            KeyComboBinding(("ENTER",), submit),
        )

    def _interaction_registry(self) -> KeyComboRegistry:
        state = self.context.state
        keys = self.context.bindings

        def select_next() -> bool:
            if state.result is not None:
                state.selection.select_next()
                state.dirty = True
            return False

        def select_previous() -> bool:
            if state.result is not None:
                state.selection.select_previous()
                state.dirty = True
            return False

        def refresh() -> bool:
            self.context.trigger_fetch()
            return False

        def to_navigation() -> bool:
            state.set_mode(Mode.NAVIGATION)
            return False

        def quit_session() -> bool:
            state.quit_requested = True
            return True

        return KeyComboRegistry().register_bindings(
            KeyComboBinding((keys.next, "DOWN"), select_next),
            KeyComboBinding((keys.previous, "UP"), select_previous),
            KeyComboBinding((keys.refresh,), refresh),
            KeyComboBinding((keys.navigate,), to_navigation),
            KeyComboBinding((keys.quit,), quit_session),
        )

    def handle(self, key: str) -> bool:
        """Handle one key and return ``True`` when the session should end."""
        if self.context.state.mode == Mode.NAVIGATION:
            return self._handle_navigation(key)
        return bool(self._interaction.dispatch(key))

    def _handle_navigation(self, key: str) -> bool:
        handled = self._navigation.dispatch(key)
        if handled is not None:
            return bool(handled)
        if len(key) == 1 and key.isprintable():
            self.context.state.location.append(key)
            self.context.state.dirty = True
        return False
