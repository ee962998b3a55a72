"""Verso Template — renderable templates with named sections.

A template wraps a finished node tree (``ParsingState.root()``) together with
the sections registered while building it. Two strategies render the same
tree with identical output:

InterpretedTemplate:
    Walks the node tree with ``Node.evaluate()``.

CompiledTemplate:
    Runs the ``render(_ctx)`` function produced by ``TemplateCompiler``.
    Every section has its own compiled function.

Rendering a section always goes through ``render_section()``. It applies the
depth guard and creates the child variable scope; the one-shot rendering flag
is set right before the section node runs, in both strategies.

Memory Safety:
    Templates hold ``weakref.ref(env)``; the Environment may cache
    templates without creating a reference cycle.

Thread-Safety:
    Templates are immutable after construction. ``render()`` builds a fresh
    RenderingContext per call, so concurrent renders share nothing mutable.

"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from verso.environment.exceptions import (
    TemplateError,
    TemplateRuntimeError,
    UnknownSectionError,
)
from verso.template.helpers import STATIC_NAMESPACE
from verso.utils.output import str_safe
from verso.view_helpers.section import SectionViewHelper

if TYPE_CHECKING:
    from collections.abc import Callable

    from verso.compiler.core import CompiledModule
    from verso.environment.core import Environment
    from verso.nodes import RootNode, ViewHelperNode
    from verso.parser import ParsingState
    from verso.render_context import RenderingContext

logger = logging.getLogger(__name__)


class Template:
    """Base class for renderable templates.

    Attributes:
        name: Template name (for error messages), or None for inline templates
        root_node: Root of the node tree
    """

    __slots__ = ("__weakref__", "_env_ref", "_sections", "name", "root_node")

    def __init__(self, env: Environment, state: ParsingState, name: str | None = None):
        if state.root_node is None:
            raise ValueError("ParsingState has no root; call state.root() first")
        self._env_ref = weakref.ref(env)
        self.name = name
        self.root_node: RootNode = state.root_node
        self._sections: dict[str, ViewHelperNode] = dict(state.sections)

    @property
    def env(self) -> Environment:
        env = self._env_ref()
        if env is None:
            raise RuntimeError("Environment has been garbage collected")
        return env

    @property
    def section_names(self) -> frozenset[str]:
        return frozenset(self._sections)

    def has_section(self, name: str) -> bool:
        return name in self._sections

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render the template.

        Args:
            *args: Single dict of variables
            **kwargs: Variables as keyword arguments

        Returns:
            Rendered output as string

        Example:
            >>> template.render(user={"name": "Ada"})
            'Hello Ada'
            >>> template.render({"user": {"name": "Ada"}})
            'Hello Ada'
        """
        variables: dict[str, Any] = {}
        if args:
            if len(args) == 1 and isinstance(args[0], Mapping):
                variables.update(args[0])
            else:
                raise TypeError(
                    f"render() takes at most 1 positional argument (a dict), got {len(args)}"
                )
        variables.update(kwargs)

        rendering_context = self.env.create_rendering_context(variables, template=self)
        try:
            return str_safe(self._render(rendering_context))
        except TemplateError:
            raise
        except Exception as e:
            raise TemplateRuntimeError(
                f"{type(e).__name__}: {e}",
                template_name=self.name,
                section=rendering_context.section_stack[-1]
                if rendering_context.section_stack
                else None,
            ) from e

    def render_section(
        self,
        name: str,
        variables: Mapping[str, Any],
        rendering_context: RenderingContext,
        optional: bool = False,
        default: Any = "",
    ) -> Any:
        """Render section ``name`` in a new variable scope.

        Args:
            name: Registered section name
            variables: Variables for the section scope
            rendering_context: Context of the caller
            optional: Return ``default`` instead of raising when the section is unknown
            default: Output for unknown optional sections

        Raises:
            UnknownSectionError: If the section is unknown and not optional
            SectionDepthError: If recursion exceeds ``max_section_depth``
        """
        if name not in self._sections:
            if optional:
                return default
            raise UnknownSectionError(
                name, available=self.section_names, template_name=self.name
            )
        rendering_context.check_section_depth(name)
        child = rendering_context.child_context(name, variables)
        logger.debug(
            "Rendering section %r of %s at depth %d",
            name,
            self.name or "<template>",
            child.section_depth,
        )
        container = child.view_helper_variable_container
        container.add_or_update(SectionViewHelper, SectionViewHelper.RENDERING_FLAG, True)
        try:
            return self._render_section(name, child)
        finally:
            # Left behind only if the section failed before taking it
            container.remove(SectionViewHelper, SectionViewHelper.RENDERING_FLAG)

    def _render(self, rendering_context: RenderingContext) -> Any:
        raise NotImplementedError

    def _render_section(self, name: str, rendering_context: RenderingContext) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name or '(inline)'}>"


class InterpretedTemplate(Template):
    """Renders by walking the node tree."""

    __slots__ = ()

    def _render(self, rendering_context: RenderingContext) -> Any:
        return self.root_node.evaluate(rendering_context)

    def _render_section(self, name: str, rendering_context: RenderingContext) -> Any:
        return self._sections[name].evaluate(rendering_context)


class CompiledTemplate(Template):
    """Renders through code generated by ``TemplateCompiler``."""

    __slots__ = ("_render_func", "_section_funcs")

    def __init__(
        self,
        env: Environment,
        state: ParsingState,
        compiled: CompiledModule,
        name: str | None = None,
    ):
        super().__init__(env, state, name)
        namespace: dict[str, Any] = {**STATIC_NAMESPACE, **compiled.references}
        exec(compiled.code, namespace)
        self._render_func: Callable[[RenderingContext], Any] = namespace["render"]
        self._section_funcs: dict[str, Callable[[RenderingContext], Any]] = {
            section: namespace[function_name]
            for section, function_name in compiled.sections.items()
        }

    def _render(self, rendering_context: RenderingContext) -> Any:
        return self._render_func(rendering_context)

    def _render_section(self, name: str, rendering_context: RenderingContext) -> Any:
        return self._section_funcs[name](rendering_context)
