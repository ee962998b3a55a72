"""Tests for Verso error types, codes and messages."""

from __future__ import annotations

import pytest

from verso import (
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
from verso.environment import terminal

from .helpers import GreetViewHelper


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    """Compare messages without ANSI colors."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


class TestHierarchy:
    """Test the exception tree."""

    @pytest.mark.parametrize(
        ("error", "parent"),
        [
            (UnknownViewHelperError("f:x"), TemplateSyntaxError),
            (UnknownSectionError("s"), TemplateRuntimeError),
            (SectionDepthError("s", 3), TemplateRuntimeError),
            (DuplicateArgumentError("a"), ViewHelperArgumentError),
            (UndeclaredArgumentError("a"), ViewHelperArgumentError),
            (ArgumentTypeError("a", "string", "int"), ViewHelperArgumentError),
            (MissingRequiredArgumentError("a"), ViewHelperArgumentError),
            (InvalidVariableError("v"), TemplateError),
        ],
    )
    def test_parents(self, error: TemplateError, parent: type) -> None:
        """Every error derives from TemplateError through its family."""
        assert isinstance(error, parent)
        assert isinstance(error, TemplateError)


class TestErrorCodes:
    """Test searchable error codes."""

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (DuplicateArgumentError("a"), ErrorCode.DUPLICATE_ARGUMENT),
            (UndeclaredArgumentError("a"), ErrorCode.UNDECLARED_ARGUMENT),
            (ArgumentTypeError("a", "string", "int"), ErrorCode.ARGUMENT_TYPE),
            (MissingRequiredArgumentError("a"), ErrorCode.MISSING_ARGUMENT),
            (TemplateSyntaxError("bad"), ErrorCode.SYNTAX_ERROR),
            (UnknownViewHelperError("f:x"), ErrorCode.UNKNOWN_VIEW_HELPER),
            (TemplateRuntimeError("boom"), ErrorCode.RUNTIME_ERROR),
            (UnknownSectionError("s"), ErrorCode.UNKNOWN_SECTION),
            (SectionDepthError("s", 3), ErrorCode.SECTION_DEPTH),
            (InvalidVariableError("v"), ErrorCode.INVALID_VARIABLE),
        ],
    )
    def test_codes(self, error: TemplateError, code: ErrorCode) -> None:
        """Each error carries its code."""
        assert error.code is code
        assert error.format_compact().startswith(f"{code.value}: ")

    def test_categories(self) -> None:
        """Codes map to categories."""
        assert ErrorCode.ARGUMENT_TYPE.category == "argument"
        assert ErrorCode.UNKNOWN_VIEW_HELPER.category == "parser"
        assert ErrorCode.SECTION_DEPTH.category == "runtime"
        assert ErrorCode.INVALID_VARIABLE.category == "variable"


class TestMessages:
    """Test message content."""

    def test_type_error_message(self) -> None:
        """Type errors name argument, types and view helper."""
        error = ArgumentTypeError("items", "array", "int", GreetViewHelper)
        message = str(error)
        assert '"items"' in message
        assert '"array"' in message
        assert '"int"' in message
        assert "GreetViewHelper" in message

    def test_view_helper_instances_are_named_by_class(self) -> None:
        """Instances and classes give the same qualified name."""
        assert (
            DuplicateArgumentError("a", GreetViewHelper()).view_helper
            == DuplicateArgumentError("a", GreetViewHelper).view_helper
        )

    def test_undeclared_lists_valid_arguments(self) -> None:
        """Passed-but-undeclared errors list the declared names."""
        error = UndeclaredArgumentError("colour", declared=("name", "color"))
        assert "name, color" in str(error)

    def test_unknown_section_suggests_close_match(self) -> None:
        """A near miss suggests the registered name."""
        error = UnknownSectionError("menue", available=frozenset({"menu", "footer"}))
        assert error.suggestion == "Did you mean 'menu'?"

    def test_unknown_section_without_match(self) -> None:
        """Without a near miss the suggestion points at optional."""
        error = UnknownSectionError("zzz", available=frozenset({"menu"}))
        assert "optional" in error.suggestion

    def test_runtime_error_location(self) -> None:
        """Runtime errors show template and section."""
        error = TemplateRuntimeError("boom", template_name="page.html", section="menu")
        assert "page.html#menu" in str(error)

    def test_syntax_error_tag(self) -> None:
        """Syntax errors mention the tag."""
        error = TemplateSyntaxError("bad name", tag="f:section")
        assert "f:section" in str(error)
        assert error.tag == "f:section"

    def test_unknown_view_helper_candidate(self) -> None:
        """Unknown view helpers report the class that was looked for."""
        error = UnknownViewHelperError("f:nope", "verso.view_helpers.NopeViewHelper")
        assert "verso.view_helpers.NopeViewHelper" in str(error)
