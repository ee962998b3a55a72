"""Named-slot registry for signaling between view helpers.

View helpers sometimes need to talk to each other without putting anything
into the user-visible variable scope: a render tag unlocks a section tag,
a form tag hands state to its fields. ``ViewHelperVariableContainer`` stores
such values under ``(owner, key)``, where the owner is normally the view
helper class that defines the slot. Unrelated view helpers therefore cannot
collide on key names.

One container exists per render pass and is discarded afterwards.

"""

from __future__ import annotations

from typing import Any

from verso.environment.exceptions import InvalidVariableError

_MISSING: Any = object()


class ViewHelperVariableContainer:
    """Two-level store: owner → key → value.

    Example:
            >>> container = ViewHelperVariableContainer()
            >>> container.add_or_update(SectionViewHelper, "isCurrentlyRenderingSection", True)
            >>> container.take(SectionViewHelper, "isCurrentlyRenderingSection")
            True
            >>> container.exists(SectionViewHelper, "isCurrentlyRenderingSection")
            False

    """

    __slots__ = ("_slots",)

    def __init__(self) -> None:
        self._slots: dict[Any, dict[str, Any]] = {}

    def add(self, owner: Any, key: str, value: Any) -> None:
        """Store a value that must not already exist.

        Raises:
            InvalidVariableError: If ``key`` is already set for ``owner``
        """
        group = self._slots.setdefault(owner, {})
        if key in group:
            raise InvalidVariableError(f"{_owner_name(owner)}:{key}")
        group[key] = value

    def add_or_update(self, owner: Any, key: str, value: Any) -> None:
        self._slots.setdefault(owner, {})[key] = value

    def get(self, owner: Any, key: str, default: Any = None) -> Any:
        group = self._slots.get(owner)
        if group is None:
            return default
        return group.get(key, default)

    def exists(self, owner: Any, key: str) -> bool:
        group = self._slots.get(owner)
        return group is not None and key in group

    def remove(self, owner: Any, key: str) -> None:
        """Delete a value; missing keys are ignored."""
        self.take(owner, key)

    def take(self, owner: Any, key: str, default: Any = None) -> Any:
        """Read and remove a value in one step.

        Used for one-shot gates: whoever takes the value consumes it, and a
        second ``take`` sees ``default``.
        """
        group = self._slots.get(owner)
        if group is None:
            return default
        value = group.pop(key, _MISSING)
        if not group:
            del self._slots[owner]
        return default if value is _MISSING else value

    def get_all(self, owner: Any) -> dict[str, Any]:
        """Return a copy of every slot stored for ``owner``."""
        return dict(self._slots.get(owner, {}))

    def clear(self) -> None:
        self._slots = {}

    def __repr__(self) -> str:
        owners = ", ".join(_owner_name(owner) for owner in self._slots)
        return f"<ViewHelperVariableContainer [{owners}]>"


def _owner_name(owner: Any) -> str:
    if isinstance(owner, type):
        return owner.__qualname__
    return str(owner)
