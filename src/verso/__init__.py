"""Verso — view-helper rendering core for tag-based templates.

Templates are trees of text, variable accessors and view helper tags
(``<f:section>``, ``<f:render>``, your own). Verso binds and validates tag
arguments, runs the handlers and renders named sections, either by walking
the tree or through Python code compiled from it.

Quickstart:
    >>> from verso import Environment
    >>> env = Environment()
    >>> state = env.parsing_state()
    >>> state.root([
    ...     state.view_helper("f:section", {"name": "greeting"}, ["Hello ", state.accessor("name")]),
    ...     state.view_helper("f:render", {"section": "greeting", "arguments": state.array({"name": state.accessor("user")})}),
    ... ])
    >>> env.from_state(state).render(user="Ada")
    'Hello Ada'

Architecture:
ParsingState → Node tree → (Interpreter | Compiler → Python AST → exec())

Pipeline stages:
1. **ParsingState**: Builds immutable nodes bottom-up, runs post-parse hooks
2. **Template**: Renders the tree by evaluation, or
3. **Compiler**: Transforms the node tree to a Python ``ast.Module``
4. **Invoker**: Binds, validates and renders every view helper in both modes

Thread-Safety:
- Argument definitions are cached per class with copy-on-write publication
- Resolver namespaces and resolutions are copy-on-write
- Every render gets its own RenderingContext (variables and slot registry)

Free-Threading (PEP 703):
Declares GIL-independence via `_Py_mod_gil = 0` attribute.

"""

from verso.environment import (
    ArgumentTypeError,
    DuplicateArgumentError,
    ErrorCode,
    InvalidVariableError,
    MissingRequiredArgumentError,
    SectionDepthError,
    TemplateError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndeclaredArgumentError,
    UnknownSectionError,
    UnknownViewHelperError,
    ViewHelperArgumentError,
)
from verso.environment.core import Environment
from verso.parser import ParsingState
from verso.render_context import RenderingContext
from verso.template import CompiledTemplate, InterpretedTemplate, Template
from verso.variables import StandardVariableProvider, VariableProvider
from verso.view_helper import (
    ArgumentDefinition,
    ArgumentType,
    ViewHelper,
    ViewHelperInvoker,
    ViewHelperResolver,
    ViewHelperVariableContainer,
)

__version__ = "0.1.0"

__all__ = [
    "ArgumentDefinition",
    "ArgumentType",
    "ArgumentTypeError",
    "CompiledTemplate",
    "DuplicateArgumentError",
    "Environment",
    "ErrorCode",
    "InterpretedTemplate",
    "InvalidVariableError",
    "MissingRequiredArgumentError",
    "ParsingState",
    "RenderingContext",
    "SectionDepthError",
    "StandardVariableProvider",
    "Template",
    "TemplateError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UndeclaredArgumentError",
    "UnknownSectionError",
    "UnknownViewHelperError",
    "VariableProvider",
    "ViewHelper",
    "ViewHelperArgumentError",
    "ViewHelperInvoker",
    "ViewHelperResolver",
    "ViewHelperVariableContainer",
]


def __getattr__(name: str) -> object:
    """Module-level getattr for the free-threading declaration."""
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'verso' has no attribute {name!r}")
