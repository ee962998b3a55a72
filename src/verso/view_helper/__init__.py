"""View helper invocation core.

Modules:
    arguments: ArgumentDefinition, ArgumentType and type checks
    cache: Process-wide argument definition cache
    core: ViewHelper base class
    invoker: ViewHelperInvoker (binding and dispatch)
    resolver: ViewHelperResolver (tag identifier → class)
    variable_container: Named-slot registry for inter-tag signaling

"""

from verso.view_helper.arguments import (
    ArgumentDefinition,
    ArgumentType,
    is_array_like,
    is_compatible,
    is_object,
    is_textual,
)
from verso.view_helper.cache import DEFAULT_ARGUMENT_CACHE, ArgumentDefinitionCache
from verso.view_helper.core import ViewHelper
from verso.view_helper.invoker import ViewHelperInvoker
from verso.view_helper.resolver import ViewHelperResolver
from verso.view_helper.variable_container import ViewHelperVariableContainer

__all__ = [
    "DEFAULT_ARGUMENT_CACHE",
    "ArgumentDefinition",
    "ArgumentDefinitionCache",
    "ArgumentType",
    "ViewHelper",
    "ViewHelperInvoker",
    "ViewHelperResolver",
    "ViewHelperVariableContainer",
    "is_array_like",
    "is_compatible",
    "is_object",
    "is_textual",
]
