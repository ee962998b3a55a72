"""Verso Environment — configuration and template factory.

The Environment is the entry point of the library. It owns the view helper
resolver (tag namespaces), the invoker and its argument-definition cache,
and turns finished ParsingStates into templates.

Example:
    >>> env = Environment()
    >>> state = env.parsing_state()
    >>> state.root([
    ...     state.view_helper("f:section", {"name": "greeting"}, ["Hello ", state.accessor("name")]),
    ...     state.view_helper("f:render", {"section": "greeting", "arguments": state.array({"name": state.accessor("user")})}),
    ... ])
    >>> env.from_state(state).render(user="Ada")
    'Hello Ada'

Thread-Safety:
    Configuration is read-only after construction apart from
    ``add_namespace()``, which is copy-on-write. Rendering never mutates the
    Environment.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from verso.compiler import TemplateCompiler
from verso.parser import ParsingState
from verso.render_context import RenderingContext
from verso.template import CompiledTemplate, InterpretedTemplate, Template
from verso.variables import StandardVariableProvider
from verso.view_helper.cache import DEFAULT_ARGUMENT_CACHE, ArgumentDefinitionCache
from verso.view_helper.invoker import ViewHelperInvoker
from verso.view_helper.resolver import ViewHelperResolver

logger = logging.getLogger(__name__)


class Environment:
    """Central configuration for building and rendering templates.

    Args:
        namespaces: Tag namespace → Python package holding its view helpers.
            Defaults to ``{"f": "verso.view_helpers"}``; given namespaces are
            added to the default.
        argument_cache: Argument-definition cache shared by all invocations
        max_section_depth: Maximum nesting of section renders
        compiled: Whether ``from_state()`` compiles templates by default

    Attributes:
        argument_cache: Argument-definition cache
        invoker: ViewHelperInvoker used by both rendering strategies
        resolver: ViewHelperResolver for tag identifiers
        max_section_depth: Recursion guard for section rendering
        compiled: Default rendering strategy for ``from_state()``
    """

    def __init__(
        self,
        *,
        namespaces: Mapping[str, str] | None = None,
        argument_cache: ArgumentDefinitionCache | None = None,
        max_section_depth: int = 50,
        compiled: bool = True,
    ):
        if max_section_depth < 1:
            raise ValueError(f"max_section_depth must be at least 1, got {max_section_depth}")
        self.argument_cache = (
            argument_cache if argument_cache is not None else DEFAULT_ARGUMENT_CACHE
        )
        self.invoker = ViewHelperInvoker(self.argument_cache)
        self.resolver = ViewHelperResolver(invoker=self.invoker)
        for namespace, package in (namespaces or {}).items():
            self.resolver.add_namespace(namespace, package)
        self.max_section_depth = max_section_depth
        self.compiled = compiled

    def add_namespace(self, namespace: str, package: str) -> None:
        """Register (or replace) a tag namespace."""
        self.resolver.add_namespace(namespace, package)

    def parsing_state(self) -> ParsingState:
        """Create a ParsingState that resolves tags through this Environment."""
        return ParsingState(self.resolver)

    def from_state(
        self,
        state: ParsingState,
        name: str | None = None,
        compiled: bool | None = None,
    ) -> Template:
        """Create a template from a finished ParsingState.

        Args:
            state: State whose ``root()`` has been built
            name: Template name for error messages
            compiled: Override the Environment's default strategy
        """
        use_compiled = self.compiled if compiled is None else compiled
        if use_compiled:
            return self.compile(state, name)
        return self.interpret(state, name)

    def interpret(self, state: ParsingState, name: str | None = None) -> InterpretedTemplate:
        """Create a template that renders by walking the node tree."""
        return InterpretedTemplate(self, state, name)

    def compile(self, state: ParsingState, name: str | None = None) -> CompiledTemplate:
        """Compile a ParsingState into a template backed by generated code."""
        if state.root_node is None:
            raise ValueError("ParsingState has no root; call state.root() first")
        compiled = TemplateCompiler().compile(state.root_node, state.sections, name)
        return CompiledTemplate(self, state, compiled, name)

    def create_rendering_context(
        self,
        variables: Mapping[str, Any] | None = None,
        template: Template | None = None,
    ) -> RenderingContext:
        """Create a fresh context for one top-level render."""
        return RenderingContext(
            variable_provider=StandardVariableProvider(dict(variables or {})),
            view_helper_resolver=self.resolver,
            template=template,
            max_section_depth=self.max_section_depth,
        )

    def __repr__(self) -> str:
        return (
            f"<Environment namespaces={sorted(self.resolver.namespaces)} "
            f"compiled={self.compiled}>"
        )
