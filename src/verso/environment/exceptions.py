"""Exceptions for the Verso template core.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError             # Build-time error (bad section name, ...)
│   └── UnknownViewHelperError      # Tag could not be resolved to a class
├── TemplateRuntimeError            # Render-time error with context
│   ├── UnknownSectionError         # Section name was never registered
│   └── SectionDepthError           # Runaway recursive section rendering
├── ViewHelperArgumentError         # Argument declaration and binding
│   ├── DuplicateArgumentError      # Argument declared twice
│   ├── UndeclaredArgumentError     # Override/pass of an undeclared argument
│   ├── ArgumentTypeError           # Bound value incompatible with its type
│   └── MissingRequiredArgumentError
└── InvalidVariableError            # VariableProvider.add() on a bound name

Argument errors are template-author errors. They are raised during binding
and validation of a single invocation, never retried, and never wrapped by
the template layer.

Example:
    ```
    V-ARG-003: The argument "items" was registered with type "array", but is
    of type "int" in view helper "app.ListViewHelper".
    ```

"""

from __future__ import annotations

from enum import Enum
from typing import Any

from verso.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes for Verso errors.

    Format: V-{CATEGORY}-{NUMBER}
    Categories: ARG (arguments), PAR (parse/build), RUN (runtime), VAR (variables)
    """

    # Argument errors (V-ARG-xxx)
    DUPLICATE_ARGUMENT = "V-ARG-001"
    UNDECLARED_ARGUMENT = "V-ARG-002"
    ARGUMENT_TYPE = "V-ARG-003"
    MISSING_ARGUMENT = "V-ARG-004"

    # Parse/build errors (V-PAR-xxx)
    SYNTAX_ERROR = "V-PAR-001"
    UNKNOWN_VIEW_HELPER = "V-PAR-002"

    # Runtime errors (V-RUN-xxx)
    RUNTIME_ERROR = "V-RUN-001"
    UNKNOWN_SECTION = "V-RUN-002"
    SECTION_DEPTH = "V-RUN-003"

    # Variable errors (V-VAR-xxx)
    INVALID_VARIABLE = "V-VAR-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'argument', 'parser', 'runtime', 'variable')."""
        prefix = self.value.split("-")[1]
        return {
            "ARG": "argument",
            "PAR": "parser",
            "RUN": "runtime",
            "VAR": "variable",
        }.get(prefix, "unknown")


def qualified_name(obj: Any) -> str:
    """Dotted name of a class (or of an instance's class) for messages."""
    cls = obj if isinstance(obj, type) else type(obj)
    return f"{cls.__module__}.{cls.__qualname__}"


class TemplateError(Exception):
    """Base exception for all Verso errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a one-screen diagnostic without traceback noise."""
        return terminal.format_error_header(
            self.code.value if self.code else None,
            str(self),
        )


class TemplateSyntaxError(TemplateError):
    """Error detected while building the node tree.

    Raised before any rendering happens, e.g. when a section name is not a
    literal or a tag cannot be resolved.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(self, message: str, *, tag: str | None = None):
        self.message = message
        self.tag = tag
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.tag:
            return f"Syntax Error: {self.message}\n  --> {terminal.location(self.tag)}"
        return f"Syntax Error: {self.message}"


class UnknownViewHelperError(TemplateSyntaxError):
    """A tag identifier could not be resolved to a view helper class."""

    code: ErrorCode | None = ErrorCode.UNKNOWN_VIEW_HELPER

    def __init__(self, identifier: str, candidate: str | None = None):
        self.identifier = identifier
        self.candidate = candidate
        message = f"Unknown view helper '{identifier}'"
        if candidate:
            message += f" (looked for {candidate})"
        super().__init__(message, tag=identifier)


class TemplateRuntimeError(TemplateError):
    """Render-time error with debugging context.

    Attributes:
        message: Error description
        template_name: Name of the template being rendered
        section: Section being rendered when the error occurred
        suggestion: Actionable fix suggestion
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        section: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.section = section
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]
        if self.template_name or self.section:
            loc = self.template_name or "<template>"
            if self.section:
                loc += f"#{self.section}"
            parts.append(f"  Location: {terminal.location(loc)}")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Suggestion:')} {self.suggestion}")
        return "\n".join(parts)


class UnknownSectionError(TemplateRuntimeError):
    """The render collaborator was asked for a section that was never registered."""

    code: ErrorCode | None = ErrorCode.UNKNOWN_SECTION

    def __init__(
        self,
        name: str,
        available: frozenset[str] = frozenset(),
        **kwargs: Any,
    ):
        self.name = name
        self.available = available
        suggestion = "Pass optional=True to render nothing for missing sections"
        if available:
            from difflib import get_close_matches

            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                suggestion = f"Did you mean '{matches[0]}'?"
        super().__init__(
            f"Section '{name}' is not defined",
            section=name,
            suggestion=suggestion,
            **kwargs,
        )


class SectionDepthError(TemplateRuntimeError):
    """Recursive section rendering exceeded the configured depth."""

    code: ErrorCode | None = ErrorCode.SECTION_DEPTH

    def __init__(self, name: str, max_depth: int, **kwargs: Any):
        self.name = name
        self.max_depth = max_depth
        super().__init__(
            f"Maximum section depth exceeded ({max_depth}) when rendering '{name}'",
            section=name,
            suggestion="Check that recursive sections stop when their data runs out",
            **kwargs,
        )


class ViewHelperArgumentError(TemplateError):
    """Base class for argument declaration and binding errors.

    Attributes:
        argument_name: Name of the offending argument
        view_helper: Dotted name of the view helper class, if known
    """

    def __init__(self, message: str, argument_name: str, view_helper: Any = None):
        self.message = message
        self.argument_name = argument_name
        self.view_helper = qualified_name(view_helper) if view_helper is not None else None
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.view_helper:
            return f'{self.message} in view helper "{terminal.location(self.view_helper)}".'
        return f"{self.message}."


class DuplicateArgumentError(ViewHelperArgumentError):
    """An argument name was registered twice for the same view helper."""

    code: ErrorCode | None = ErrorCode.DUPLICATE_ARGUMENT

    def __init__(self, argument_name: str, view_helper: Any = None):
        super().__init__(
            f'Argument "{terminal.argument(argument_name)}" has already been defined, '
            "thus it should not be defined again",
            argument_name,
            view_helper,
        )


class UndeclaredArgumentError(ViewHelperArgumentError):
    """An argument was overridden or passed without being declared first."""

    code: ErrorCode | None = ErrorCode.UNDECLARED_ARGUMENT

    def __init__(
        self,
        argument_name: str,
        view_helper: Any = None,
        *,
        declared: tuple[str, ...] | None = None,
    ):
        self.declared = declared
        if declared is None:
            message = (
                f'Argument "{terminal.argument(argument_name)}" has not been defined, '
                "thus it can't be overridden"
            )
        else:
            valid = ", ".join(declared) or "(none)"
            message = (
                f'Undeclared argument "{terminal.argument(argument_name)}" passed; '
                f"valid arguments are: {valid}"
            )
        super().__init__(message, argument_name, view_helper)


class ArgumentTypeError(ViewHelperArgumentError):
    """A bound value does not satisfy its argument's declared type.

    Attributes:
        declared_type: Declared type label (e.g. "array", "decimal.Decimal")
        actual_type: Runtime type name of the offending value
    """

    code: ErrorCode | None = ErrorCode.ARGUMENT_TYPE

    def __init__(
        self,
        argument_name: str,
        declared_type: str,
        actual_type: str,
        view_helper: Any = None,
    ):
        self.declared_type = declared_type
        self.actual_type = actual_type
        super().__init__(
            f'The argument "{terminal.argument(argument_name)}" was registered with type '
            f'"{terminal.type_name(declared_type)}", but is of type '
            f'"{terminal.type_name(actual_type)}"',
            argument_name,
            view_helper,
        )


class MissingRequiredArgumentError(ViewHelperArgumentError):
    """A required argument was not supplied and has no default."""

    code: ErrorCode | None = ErrorCode.MISSING_ARGUMENT

    def __init__(self, argument_name: str, view_helper: Any = None):
        super().__init__(
            f'Required argument "{terminal.argument(argument_name)}" was not supplied',
            argument_name,
            view_helper,
        )


class InvalidVariableError(TemplateError):
    """A variable identifier is already bound in the provider."""

    code: ErrorCode | None = ErrorCode.INVALID_VARIABLE

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            f"Variable '{identifier}' is already bound; "
            f"remove it first or use add_or_update()"
        )
