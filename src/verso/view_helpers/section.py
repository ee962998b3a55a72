"""Section view helper: named, reusable subtrees.

    <f:section name="menu">
      <ul>{items}</ul>
    </f:section>
    <f:render section="menu" arguments="{items: menu}" />

A section is registered by name when it is built, and rendered only when a
render tag asks for it. Encountered inline it outputs nothing, but its
arguments are still bound and validated in both rendering modes. The render
side (``RenderViewHelper`` and ``Template.render_section``) sets a one-shot
flag right before evaluating the section node; the section takes the flag
and renders its children. Recursive sections work because each render call
sets the flag again immediately before evaluating the node.
"""

from __future__ import annotations

import ast
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from verso.environment.exceptions import TemplateSyntaxError
from verso.nodes import Node, TextNode
from verso.view_helper.core import ViewHelper

if TYPE_CHECKING:
    from verso.compiler.core import TemplateCompiler
    from verso.nodes import ViewHelperNode
    from verso.variables import VariableProvider

SECTIONS_VARIABLE = "sections"


class SectionViewHelper(ViewHelper):
    """Declares a section for later use with ``f:render``."""

    RENDERING_FLAG = "isCurrentlyRenderingSection"

    escape_output = False

    def initialize_arguments(self) -> None:
        self.register_argument("name", "string", "Name of the section", required=True)

    @classmethod
    def post_parse_event(
        cls,
        node: ViewHelperNode,
        arguments: Mapping[str, Node],
        variable_provider: VariableProvider,
    ) -> None:
        """Register ``node`` under its literal name in the ``sections`` variable.

        A missing name is left to argument binding (required argument).
        """
        name_argument = arguments.get("name")
        if name_argument is None:
            return
        if not isinstance(name_argument, TextNode):
            raise TemplateSyntaxError(
                "Section names must be literal text, not expressions",
                tag=node.identifier,
            )
        sections = dict(variable_provider.get(SECTIONS_VARIABLE) or {})
        sections[name_argument.text] = node
        variable_provider.add_or_update(SECTIONS_VARIABLE, sections)

    def render(self) -> Any:
        """Render children only when a render tag unlocked this section."""
        container = self.view_helper_variable_container
        if not container.exists(SectionViewHelper, self.RENDERING_FLAG):
            return ""
        container.remove(SectionViewHelper, self.RENDERING_FLAG)
        return self.render_children()

    def compile(
        self,
        arguments_name: str,
        closure_name: str,
        initialization: list[ast.stmt],
        node: ViewHelperNode,
        compiler: TemplateCompiler,
    ) -> ast.expr:
        """Compile the inline position to ``""`` after validating its arguments.

        Section bodies are rendered from their own compiled functions. Subclasses
        that change ``initialize()`` or ``render()`` keep the default call.
        """
        if not self._has_invariant_render():
            return super().compile(arguments_name, closure_name, initialization, node, compiler)
        # <cls>.validate_static(_args_N, _ctx)
        initialization.append(
            ast.Expr(
                value=ast.Call(
                    func=ast.Attribute(
                        value=compiler.reference(type(self)),
                        attr="validate_static",
                        ctx=ast.Load(),
                    ),
                    args=[
                        ast.Name(id=arguments_name, ctx=ast.Load()),
                        ast.Name(id=compiler.context_name, ctx=ast.Load()),
                    ],
                    keywords=[],
                )
            )
        )
        return ast.Constant(value="")

    @classmethod
    def _has_invariant_render(cls) -> bool:
        return (
            cls.render is SectionViewHelper.render
            and cls.initialize is ViewHelper.initialize
            and cls.initialize_arguments_and_render is ViewHelper.initialize_arguments_and_render
            and cls.call_render_method is ViewHelper.call_render_method
        )
