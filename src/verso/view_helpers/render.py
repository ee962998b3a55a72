"""Render view helper: output a named section.

    <f:render section="menu" arguments="{items: menu.children}" />
    <f:render section="sidebar" optional="{true}" default="(no sidebar)" />

The section is rendered in a new variable scope built from ``arguments``,
through the template bound to the rendering context.
"""

from __future__ import annotations

from typing import Any

from verso.environment.exceptions import TemplateRuntimeError
from verso.view_helper.core import ViewHelper


class RenderViewHelper(ViewHelper):
    """Renders a section registered with ``f:section``."""

    escape_output = False

    def initialize_arguments(self) -> None:
        self.register_argument("section", "string", "Name of the section to render", required=True)
        self.register_argument(
            "arguments", "array", "Variables available inside the section", default_value={}
        )
        self.register_argument(
            "optional",
            "boolean",
            "Render nothing instead of failing when the section is missing",
            default_value=False,
        )
        self.register_argument(
            "default", "mixed", "Output used when an optional section is missing"
        )

    def render(self) -> Any:
        template = self._require_context().template
        if template is None:
            raise TemplateRuntimeError(
                "f:render used outside of a template render",
                suggestion="Render through Template.render()",
            )

        name = self.arguments["section"]
        variables = dict(self.arguments["arguments"] or {})
        default = self.arguments["default"]
        return template.render_section(
            name,
            variables,
            self.rendering_context,
            optional=self.arguments["optional"],
            default="" if default is None else default,
        )
