"""Tests for interpreted vs. compiled rendering.

Both strategies run the same node tree: the interpreter evaluates nodes,
compiled templates run Python generated by TemplateCompiler. Output must
be identical for every tree, including non-string view helper results
and the child-joining rules.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from typing import Any

import pytest
from hypothesis import given, settings

from verso import CompiledTemplate, Environment, InterpretedTemplate, ParsingState
from verso.compiler import TemplateCompiler
from verso.nodes import ConstantNode, Node, RootNode, TextNode
from verso.view_helper import ArgumentDefinitionCache

from .helpers import CountViewHelper, GreetViewHelper, IfViewHelper, WrapViewHelper, build
from .strategies import template_body, variables


def _build_tree(state: ParsingState, element: tuple) -> Any:
    kind = element[0]
    if kind == "text":
        return state.text(element[1])
    if kind == "var":
        return state.accessor(element[1])
    if kind == "wrap":
        return state.view_helper(
            WrapViewHelper, children=[_build_tree(state, child) for child in element[1]]
        )
    return state.view_helper(
        IfViewHelper,
        {"condition": state.accessor(element[1])},
        [_build_tree(state, child) for child in element[2]],
    )


@dataclass(frozen=True, slots=True)
class UpperNode(Node):
    """Custom node type without a compiler handler."""

    text: str

    def evaluate(self, rendering_context) -> str:
        return self.text.upper()


class TestEquivalenceProperties:
    """Property: both strategies render any tree identically."""

    @given(body=template_body, context=variables)
    @settings(max_examples=150, deadline=None)
    def test_random_trees_render_identically(self, body: tuple, context: dict) -> None:
        """Interpreted and compiled output agree for random trees."""
        env = Environment(argument_cache=ArgumentDefinitionCache())
        state = env.parsing_state()
        state.root([_build_tree(state, element) for element in body])

        interpreted = env.interpret(state).render(context)
        compiled = env.compile(state).render(context)
        assert interpreted == compiled


class TestEquivalenceCases:
    """Concrete trees rendered both ways."""

    def test_text_and_variables(self, env: Environment, state: ParsingState, mode: str) -> None:
        """Text and accessors are concatenated in document order."""
        state.root(["Hello ", state.accessor("user.name"), "!"])
        assert build(env, state, mode).render(user={"name": "Ada"}) == "Hello Ada!"

    def test_missing_variable_renders_empty(
        self, env: Environment, state: ParsingState, mode: str
    ) -> None:
        """Unresolvable paths render as empty strings."""
        state.root(["[", state.accessor("user.address.city"), "]"])
        assert build(env, state, mode).render(user={"name": "Ada"}) == "[]"

    def test_empty_template(self, env: Environment, state: ParsingState, mode: str) -> None:
        """A template without children renders an empty string."""
        state.root([])
        assert build(env, state, mode).render() == ""

    def test_single_non_string_child_is_stringified_once(
        self, env: Environment, state: ParsingState, mode: str
    ) -> None:
        """A single view helper result reaches render() untouched, then as str."""
        state.root([state.view_helper(CountViewHelper, {"items": state.accessor("items")})])
        assert build(env, state, mode).render(items=[1, 2, 3]) == "3"

    def test_view_helper_arguments_and_children(
        self, env: Environment, state: ParsingState, mode: str
    ) -> None:
        """Arguments are evaluated per render; children render through the closure."""
        state.root(
            [
                state.view_helper(GreetViewHelper, {"name": state.accessor("who")}),
                " ",
                state.view_helper(
                    WrapViewHelper, children=[state.view_helper(WrapViewHelper, children=["x"])]
                ),
            ]
        )
        template = build(env, state, mode)
        assert template.render(who="Ada") == "Hello Ada [[x]]"
        assert template.render(who="Bob") == "Hello Bob [[x]]"

    def test_constant_and_array_arguments(
        self, env: Environment, state: ParsingState, mode: str
    ) -> None:
        """Constants and arrays compile to literals or references."""
        marker = object()
        state.root(
            [
                state.view_helper(
                    CountViewHelper,
                    {"items": state.array({"a": 1, "b": state.accessor("x"), "c": marker})},
                ),
                state.constant(2.5),
                state.constant(None),
            ]
        )
        assert build(env, state, mode).render(x="y") == "32.5"

    def test_custom_node_type(self, env: Environment, state: ParsingState, mode: str) -> None:
        """Nodes without a compiler handler fall back to evaluate()."""
        state.root([UpperNode("abc"), "-"])
        assert build(env, state, mode).render() == "ABC-"

    def test_template_types(self, env: Environment, state: ParsingState) -> None:
        """from_state() honours the compiled flag."""
        state.root(["x"])
        assert isinstance(env.from_state(state), CompiledTemplate)
        assert isinstance(env.from_state(state, compiled=False), InterpretedTemplate)
        assert isinstance(
            Environment(compiled=False).from_state(state, compiled=None), InterpretedTemplate
        )


class TestTemplateCompiler:
    """Test the generated module structure."""

    def test_module_defines_render_and_sections(self, state: ParsingState) -> None:
        """One function per section plus render()."""
        state.root(
            [
                state.view_helper("f:section", {"name": "a"}, ["A"]),
                state.view_helper("f:section", {"name": "b"}, ["B"]),
            ]
        )
        compiled = TemplateCompiler().compile(state.root_node, state.sections, name="page")
        assert compiled.code.co_filename == "page"
        assert set(compiled.sections) == {"a", "b"}
        assert sorted(compiled.sections.values()) == ["_section_0", "_section_1"]

    def test_reference_deduplicates_objects(self) -> None:
        """The same object is bound to one name."""
        compiler = TemplateCompiler()
        marker = object()
        first = compiler.reference(marker)
        second = compiler.reference(marker)
        assert isinstance(first, ast.Name)
        assert first.id == second.id

    def test_literal_constants_are_inlined(self) -> None:
        """Literal constants produce no references."""
        root = RootNode((ConstantNode(1), ConstantNode("s"), TextNode("t")))
        compiled = TemplateCompiler().compile(root)
        assert compiled.references == {}

    def test_view_helper_classes_are_referenced(self, state: ParsingState) -> None:
        """View helper classes are bound as module references."""
        state.root([state.view_helper(WrapViewHelper, children=["x"])])
        compiled = TemplateCompiler().compile(state.root_node)
        assert WrapViewHelper in compiled.references.values()

    def test_unfinished_state_cannot_compile(self, env: Environment) -> None:
        """A state without a root is rejected."""
        with pytest.raises(ValueError):
            env.compile(env.parsing_state())

    def test_logged_count_excludes_nested_roots(
        self, state: ParsingState, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Only view helper nodes are counted in the compile log."""
        wrap = state.view_helper(WrapViewHelper, children=["x"])
        root = RootNode((RootNode((TextNode("a"),)), RootNode((TextNode("b"),)), wrap))
        with caplog.at_level(logging.DEBUG, logger="verso"):
            TemplateCompiler().compile(root, name="count")
        messages = [record.getMessage() for record in caplog.records]
        assert "Compiled template count: 1 view helper node(s), 0 section(s)" in messages
