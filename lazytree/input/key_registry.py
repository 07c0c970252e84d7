"""Key tables mapping key tokens to zero-argument actions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

KeyAction = Callable[[], "bool | None"]


@dataclass(frozen=True)
class KeyComboBinding:
    """All key tokens in ``combos`` trigger the same ``handler``."""

    combos: tuple[str, ...]
    handler: KeyAction


class KeyComboRegistry:
    """Exact-match key table; handlers return ``True`` to request quit."""

    def __init__(self) -> None:
        self._actions: dict[str, KeyAction] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Bind every combo of ``binding``; a later binding wins for a shared key."""
        self._actions.update(dict.fromkeys(binding.combos, binding.handler))
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> bool | None:
        """Run the action bound to ``key``.

        Returns ``None`` for an unbound key, otherwise whether the action
        asked to quit.
        """
        action = self._actions.get(key)
        if action is None:
            return None
        return bool(action())


__all__ = ["KeyAction", "KeyComboBinding", "KeyComboRegistry"]
