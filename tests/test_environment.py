"""Tests for Environment, Template.render() and ParsingState."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from verso import (
    ArgumentTypeError,
    Environment,
    ParsingState,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UnknownViewHelperError,
    ViewHelper,
)
from verso.nodes import ConstantNode, TextNode
from verso.parser import as_node

from .helpers import GreetViewHelper, build


class ExplodingViewHelper(ViewHelper):
    """Raises a plain Python error."""

    def render(self) -> Any:
        raise ZeroDivisionError("division by zero")


class TestEnvironmentConfiguration:
    """Test Environment options."""

    def test_defaults(self) -> None:
        """Default configuration."""
        env = Environment()
        assert env.compiled is True
        assert env.max_section_depth == 50
        assert env.resolver.namespaces == {"f": "verso.view_helpers"}

    def test_invalid_depth(self) -> None:
        """max_section_depth must be positive."""
        with pytest.raises(ValueError):
            Environment(max_section_depth=0)

    def test_add_namespace(self, env: Environment) -> None:
        """Namespaces can be added after construction."""
        env.add_namespace("x", "verso.view_helpers")
        assert env.resolver.is_namespace_valid("x")

    def test_rendering_context_is_fresh(self, env: Environment) -> None:
        """Each context gets its own variables and slot registry."""
        first = env.create_rendering_context({"a": 1})
        second = env.create_rendering_context({"a": 1})
        assert first.variable_provider is not second.variable_provider
        assert first.view_helper_variable_container is not second.view_helper_variable_container
        assert first.max_section_depth == env.max_section_depth
        assert first.section_depth == 0


class TestTemplateRender:
    """Test Template.render()."""

    def test_positional_dict_and_kwargs(
        self, env: Environment, state: ParsingState, mode: str
    ) -> None:
        """Variables come from one dict plus keyword arguments."""
        state.root([state.accessor("a"), state.accessor("b")])
        template = build(env, state, mode)
        assert template.render({"a": "1"}, b="2") == "12"
        assert template.render({"a": "1", "b": "x"}, b="2") == "12"

    def test_too_many_positional_arguments(self, env: Environment, state: ParsingState) -> None:
        """More than one positional argument is a TypeError."""
        state.root([])
        with pytest.raises(TypeError):
            env.interpret(state).render({}, {})

    def test_argument_errors_propagate_unchanged(
        self, env: Environment, state: ParsingState, mode: str
    ) -> None:
        """Template errors are not wrapped."""
        state.root([state.view_helper(GreetViewHelper, {"name": state.accessor("who")})])
        with pytest.raises(ArgumentTypeError):
            build(env, state, mode).render(who=["not", "a", "string"])

    def test_python_errors_are_wrapped(
        self, env: Environment, state: ParsingState, mode: str
    ) -> None:
        """Unexpected exceptions become TemplateRuntimeError with the cause attached."""
        state.root([state.view_helper(ExplodingViewHelper)])
        with pytest.raises(TemplateRuntimeError) as exc_info:
            build(env, state, mode, name="boom.html").render()
        assert exc_info.value.template_name == "boom.html"
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

    def test_renders_are_independent(
        self, env: Environment, state: ParsingState, mode: str
    ) -> None:
        """Variables do not leak between renders."""
        state.root([state.accessor("x")])
        template = build(env, state, mode)
        assert template.render(x="1") == "1"
        assert template.render() == ""

    def test_repr(self, env: Environment, state: ParsingState) -> None:
        """Templates show their name."""
        state.root([])
        assert "page.html" in repr(env.interpret(state, name="page.html"))
        assert "(inline)" in repr(env.compile(state))


class TestParsingState:
    """Test programmatic tree building."""

    def test_as_node(self) -> None:
        """Plain values are wrapped in nodes."""
        assert as_node("x") == TextNode("x")
        assert as_node(1) == ConstantNode(1)
        node = TextNode("y")
        assert as_node(node) is node

    def test_root_twice_fails(self, state: ParsingState) -> None:
        """A state builds exactly one root."""
        state.root([])
        with pytest.raises(TemplateSyntaxError):
            state.root([])

    def test_unresolvable_tag(self, state: ParsingState) -> None:
        """Unknown tags fail at build time."""
        with pytest.raises(UnknownViewHelperError):
            state.view_helper("f:nope")

    def test_nodes_keep_identifier(self, state: ParsingState) -> None:
        """Nodes remember the tag as written."""
        assert state.view_helper("f:render", {"section": "s"}).identifier == "f:render"
        assert state.view_helper(GreetViewHelper, {"name": "x"}).identifier == "GreetViewHelper"

    def test_unfinished_state(self, env: Environment) -> None:
        """Templates need a finished tree."""
        with pytest.raises(ValueError):
            env.interpret(env.parsing_state())


class TestLogging:
    """Test debug logging."""

    def test_compile_and_section_logging(
        self, env: Environment, state: ParsingState, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Compilation and section rendering emit debug records."""
        state.root(
            [
                state.view_helper("f:section", {"name": "s"}, ["x"]),
                state.view_helper("f:render", {"section": "s"}),
            ]
        )
        with caplog.at_level(logging.DEBUG, logger="verso"):
            env.compile(state, name="logged.html").render()
        messages = [record.getMessage() for record in caplog.records]
        assert any("Compiled template logged.html" in message for message in messages)
        assert any("Rendering section 's'" in message for message in messages)
