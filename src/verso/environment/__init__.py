"""Verso environment: configuration, errors and terminal formatting.

``Environment`` is loaded on first access; the exception classes are
imported by nearly every other module and must not pull in the template
machinery.
"""

from typing import Any

from verso.environment.exceptions import (
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

__all__ = [
    "ArgumentTypeError",
    "DuplicateArgumentError",
    "Environment",
    "ErrorCode",
    "InvalidVariableError",
    "MissingRequiredArgumentError",
    "SectionDepthError",
    "TemplateError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UndeclaredArgumentError",
    "UnknownSectionError",
    "UnknownViewHelperError",
    "ViewHelperArgumentError",
]


def __getattr__(name: str) -> Any:
    if name == "Environment":
        from verso.environment.core import Environment

        return Environment
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
