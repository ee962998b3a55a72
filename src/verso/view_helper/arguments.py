"""Argument definitions and type checks for view helper arguments.

Every view helper declares its arguments once per class. A declaration is an
immutable ``ArgumentDefinition`` whose ``type`` is either a member of the
closed ``ArgumentType`` enumeration or a Python class:

    >>> ArgumentDefinition("items", "array", "Items to list", required=True)
    ArgumentDefinition(name='items', type=<ArgumentType.ARRAY: 'array'>, ...)
    >>> ArgumentDefinition("when", "datetime.datetime", "Timestamp").type
    <class 'datetime.datetime'>

Type compatibility is decided by capability checks rather than by exact
runtime type, so user objects can satisfy ``array`` or ``string`` by
implementing the right protocol:

    ========  ==========================================================
    Type      Accepted values
    ========  ==========================================================
    mixed     anything
    object    anything that is not a scalar or a plain dict/list/tuple
    array     mappings, non-string sequences, sets, or any object that
              is iterable or supports ``obj[key]``; never str/bytes
    string    ``str``, or an object whose class defines ``__str__``
    boolean   ``bool``
    integer   ``int`` (not ``bool``)
    float     ``float`` or ``int`` (not ``bool``)
    <class>   ``isinstance(value, cls)``
    ========  ==========================================================

"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence, Set
from dataclasses import dataclass
from enum import Enum
from pkgutil import resolve_name
from typing import Any

from verso.environment.exceptions import ArgumentTypeError


class ArgumentType(Enum):
    """Closed set of declarable argument types (besides plain classes)."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    ARRAY = "array"
    OBJECT = "object"
    MIXED = "mixed"


# Spellings accepted by ArgumentDefinition in addition to the enum values
_TYPE_ALIASES: dict[str, ArgumentType] = {
    "str": ArgumentType.STRING,
    "bool": ArgumentType.BOOLEAN,
    "int": ArgumentType.INTEGER,
    "double": ArgumentType.FLOAT,
    "list": ArgumentType.ARRAY,
    "dict": ArgumentType.ARRAY,
}

DeclaredType = ArgumentType | type

_SCALARS = (str, bytes, bytearray, int, float, bool)
_PLAIN_CONTAINERS = (dict, list, tuple)


def coerce_type(declared: str | ArgumentType | type) -> DeclaredType:
    """Normalize a declared type to an ``ArgumentType`` member or a class.

    Args:
        declared: Enum member, class, type name (``"array"``, ``"bool"``),
            or dotted import path to a class (``"decimal.Decimal"``)

    Raises:
        ValueError: If a string names neither a known type nor an importable class
    """
    if isinstance(declared, (ArgumentType, type)):
        return declared
    if not isinstance(declared, str):
        raise ValueError(f"Invalid argument type declaration: {declared!r}")
    lowered = declared.lower()
    for member in ArgumentType:
        if member.value == lowered:
            return member
    if lowered in _TYPE_ALIASES:
        return _TYPE_ALIASES[lowered]
    try:
        resolved = resolve_name(declared)
    except (ImportError, AttributeError, ValueError) as e:
        raise ValueError(f"Unknown argument type '{declared}'") from e
    if not isinstance(resolved, type):
        raise ValueError(f"Argument type '{declared}' does not name a class")
    return resolved


def type_label(declared: DeclaredType) -> str:
    """Human-readable name of a declared type for error messages."""
    if isinstance(declared, ArgumentType):
        return declared.value
    return f"{declared.__module__}.{declared.__qualname__}"


def runtime_type_label(value: Any) -> str:
    """Human-readable runtime type of ``value`` for error messages."""
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


# ---------------------------------------------------------------------------
# Capability checks
# ---------------------------------------------------------------------------


def is_object(value: Any) -> bool:
    """True for values that are neither scalars nor plain dict/list/tuple."""
    return value is not None and not isinstance(value, _SCALARS + _PLAIN_CONTAINERS)


def is_array_like(value: Any) -> bool:
    """True for containers and for objects that iterate or support ``obj[key]``."""
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if isinstance(value, (Mapping, Sequence, Set)):
        return True
    return hasattr(value, "__iter__") or hasattr(value, "__getitem__")


def is_textual(value: Any) -> bool:
    """True for strings and for objects whose class defines ``__str__``."""
    if isinstance(value, str):
        return True
    if not is_object(value):
        return False
    return type(value).__str__ is not object.__str__


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_float(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


_CHECKS: dict[ArgumentType, Callable[[Any], bool]] = {
    ArgumentType.MIXED: lambda value: True,
    ArgumentType.OBJECT: is_object,
    ArgumentType.ARRAY: is_array_like,
    ArgumentType.STRING: is_textual,
    ArgumentType.BOOLEAN: _is_boolean,
    ArgumentType.INTEGER: _is_integer,
    ArgumentType.FLOAT: _is_float,
}


def is_compatible(value: Any, declared: DeclaredType) -> bool:
    """Return True if ``value`` satisfies the declared type."""
    if isinstance(declared, ArgumentType):
        return _CHECKS[declared](value)
    return isinstance(value, declared)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ArgumentDefinition:
    """Immutable declaration of one view helper argument.

    Attributes:
        name: Argument name as used in templates
        type: ``ArgumentType`` member or class (strings are coerced)
        description: Human-readable description
        required: Whether the argument must be supplied
        default_value: Value bound when an optional argument is omitted
    """

    name: str
    type: DeclaredType
    description: str = ""
    required: bool = False
    default_value: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", coerce_type(self.type))

    @property
    def type_label(self) -> str:
        return type_label(self.type)

    def is_default(self, value: Any) -> bool:
        """True if ``value`` is this argument's default (same type and value)."""
        default = self.default_value
        if value is default:
            return True
        return type(value) is type(default) and _safe_equals(value, default)

    def validate(self, value: Any, view_helper: Any = None) -> None:
        """Check a bound value against this definition.

        None, the default value and ``mixed`` arguments are always accepted.

        Raises:
            ArgumentTypeError: If the value is incompatible with ``type``
        """
        if value is None or self.type is ArgumentType.MIXED or self.is_default(value):
            return
        if not is_compatible(value, self.type):
            raise ArgumentTypeError(
                self.name,
                self.type_label,
                runtime_type_label(value),
                view_helper,
            )


def _safe_equals(left: Any, right: Any) -> bool:
    try:
        return bool(left == right)
    except (TypeError, ValueError):
        # Ambiguous truth value, e.g. elementwise __eq__
        return False
