"""Variable providers: the user-visible variable scope of a render pass.

A provider wraps a source (normally a dict) and offers flat lookup by
identifier plus dotted-path lookup through arbitrarily nested data:

    >>> provider = StandardVariableProvider({"a": {"b": {"c": 42}}})
    >>> provider.get_by_path("a.b.c")
    42
    >>> provider.get_by_path("a.b.missing") is None
    True

Path resolution is read-only and never raises for missing segments; an
unresolvable path simply yields ``None``.

Thread-Safety:
    A provider belongs to a single render pass and is not shared between
    threads. Path resolution never mutates the source.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping, Sequence
from typing import Any, Protocol, runtime_checkable

from verso.environment.exceptions import InvalidVariableError

SCOPE_SEPARATOR = "."

# Accessor method prefixes tried on objects after plain attribute lookup,
# in order: {{ user.active }} -> user.is_active()
ACCESSOR_PREFIXES: tuple[str, ...] = ("get_", "is_", "has_")

# Identifiers carried into every scope copy (see get_scope_copy)
INHERITED_IDENTIFIERS: frozenset[str] = frozenset({"settings"})


class _Missing:
    """Sentinel for a path segment that could not be resolved."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Missing"


MISSING = _Missing()


def resolve_segment(subject: Any, segment: str) -> Any:
    """Resolve one path segment against ``subject``.

    Resolution order:
    - Mappings: key lookup only, never through ``__missing__``.
    - Sequences (not strings): integer index, negative indexes allowed.
    - Other objects: attribute, then ``get_``/``is_``/``has_`` accessor
      methods, then ``subject[segment]``. Segments starting with ``_`` are
      never resolved on objects.

    Returns:
        The resolved value, or ``MISSING`` when the segment cannot be
        resolved (including when ``subject`` is None or a scalar).
    """
    if subject is None or isinstance(subject, (str, bytes, int, float)):
        return MISSING
    if isinstance(subject, Mapping):
        # Membership first: indexing a defaultdict would insert the key
        if segment not in subject:
            return MISSING
        return subject[segment]
    if isinstance(subject, Sequence):
        try:
            return subject[int(segment)]
        except (ValueError, IndexError):
            return MISSING
    if segment.startswith("_"):
        return MISSING
    try:
        return getattr(subject, segment)
    except AttributeError:
        pass
    for prefix in ACCESSOR_PREFIXES:
        accessor = getattr(subject, prefix + segment, None)
        if callable(accessor):
            return accessor()
    if hasattr(subject, "__getitem__"):
        try:
            return subject[segment]
        except (KeyError, IndexError, TypeError):
            return MISSING
    return MISSING


@runtime_checkable
class VariableProvider(Protocol):
    """Interface for anything able to provide variables to a render pass.

    Implementations must support the getters; ``add``/``remove`` may raise
    for read-only sources.
    """

    @property
    def source(self) -> Any: ...

    def get(self, identifier: str) -> Any: ...

    def get_by_path(self, path: str) -> Any: ...

    def add(self, identifier: str, value: Any) -> None: ...

    def add_or_update(self, identifier: str, value: Any) -> None: ...

    def remove(self, identifier: str) -> None: ...

    def exists(self, identifier: str) -> bool: ...

    def get_all_identifiers(self) -> list[str]: ...

    def get_all(self) -> Any: ...

    def get_scope_copy(self, variables: Mapping[str, Any]) -> VariableProvider: ...


class StandardVariableProvider:
    """Dict-backed variable provider.

    The source is usually a dict, but any object can be installed with
    ``set_source()``; flat and path lookups then go through
    ``resolve_segment``. Mutating methods need a mutable mapping source.

    Supports the mapping protocol for convenience:
        - ``provider["name"]`` (None when unbound)
        - ``provider["name"] = value`` (add or update)
        - ``"name" in provider``
        - ``del provider["name"]``

    Example:
            >>> provider = StandardVariableProvider({"user": {"name": "Ada"}})
            >>> provider.add("page", 1)
            >>> provider.add("page", 2)
        InvalidVariableError: Variable 'page' is already bound; ...

    """

    __slots__ = ("_source",)

    def __init__(self, variables: Mapping[str, Any] | None = None):
        self._source: Any = dict(variables) if variables else {}

    @property
    def source(self) -> Any:
        return self._source

    def set_source(self, source: Any) -> None:
        """Replace the underlying data source."""
        self._source = source

    def _mutable_source(self) -> MutableMapping[str, Any]:
        if not isinstance(self._source, MutableMapping):
            raise TypeError(
                f"{type(self).__name__} source of type {type(self._source).__name__} "
                "is read-only"
            )
        return self._source

    def get(self, identifier: str) -> Any:
        """Return the variable bound to ``identifier``, or None."""
        value = resolve_segment(self._source, identifier)
        return None if value is MISSING else value

    def get_by_path(self, path: str) -> Any:
        """Resolve a dotted path one segment at a time.

        Args:
            path: Dotted path such as ``"user.address.city"`` or ``"items.0"``

        Returns:
            The resolved value, or None if any segment is absent or not
            traversable.
        """
        subject = self._source
        for segment in path.split(SCOPE_SEPARATOR):
            subject = resolve_segment(subject, segment)
            if subject is MISSING:
                return None
        return subject

    def add(self, identifier: str, value: Any) -> None:
        """Bind a new variable.

        Raises:
            InvalidVariableError: If ``identifier`` is already bound
        """
        source = self._mutable_source()
        if identifier in source:
            raise InvalidVariableError(identifier)
        source[identifier] = value

    def add_or_update(self, identifier: str, value: Any) -> None:
        """Bind a variable, replacing any existing binding."""
        self._mutable_source()[identifier] = value

    def remove(self, identifier: str) -> None:
        """Unbind a variable; unbound identifiers are ignored."""
        self._mutable_source().pop(identifier, None)

    def exists(self, identifier: str) -> bool:
        return resolve_segment(self._source, identifier) is not MISSING

    def get_all_identifiers(self) -> list[str]:
        if isinstance(self._source, Mapping):
            return list(self._source.keys())
        return [name for name in dir(self._source) if not name.startswith("_")]

    def get_all(self) -> Any:
        """Return a shallow copy of a mapping source, or the source object itself."""
        if isinstance(self._source, Mapping):
            return dict(self._source)
        return self._source

    def get_scope_copy(self, variables: Mapping[str, Any]) -> StandardVariableProvider:
        """Create a fresh provider for a nested scope (e.g. a rendered section).

        Only ``INHERITED_IDENTIFIERS`` are carried over from this provider;
        everything else the new scope sees comes from ``variables``.
        """
        inherited = {
            name: self.get(name) for name in INHERITED_IDENTIFIERS if self.exists(name)
        }
        inherited.update(variables)
        return type(self)(inherited)

    def __getitem__(self, identifier: str) -> Any:
        return self.get(identifier)

    def __setitem__(self, identifier: str, value: Any) -> None:
        self.add_or_update(identifier, value)

    def __delitem__(self, identifier: str) -> None:
        self.remove(identifier)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.exists(identifier)

    def __iter__(self) -> Iterator[str]:
        return iter(self.get_all_identifiers())

    def __len__(self) -> int:
        return len(self.get_all_identifiers())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.get_all_identifiers()!r}>"
