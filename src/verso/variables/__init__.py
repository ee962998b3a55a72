"""Variable scoping for Verso render passes."""

from verso.variables.provider import (
    MISSING,
    SCOPE_SEPARATOR,
    StandardVariableProvider,
    VariableProvider,
    resolve_segment,
)

__all__ = [
    "MISSING",
    "SCOPE_SEPARATOR",
    "StandardVariableProvider",
    "VariableProvider",
    "resolve_segment",
]
