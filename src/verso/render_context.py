"""Verso RenderingContext — everything one render pass needs.

A rendering context bundles the active variable scope, the named-slot
registry used for view-helper signaling, the resolver that hands out the
invoker, and the template that can render named sections. It is passed
explicitly to every ``Node.evaluate()`` call and to compiled code (as
``_ctx``), so both rendering strategies see exactly the same state.

Lifetime:
    A fresh context (fresh variable provider, fresh
    ViewHelperVariableContainer) is created for every top-level render.
    Rendering a section creates a child context with a new variable scope
    that shares the container, resolver and template with its parent.

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from verso.environment.exceptions import SectionDepthError
from verso.view_helper.variable_container import ViewHelperVariableContainer

if TYPE_CHECKING:
    from verso.template.core import Template
    from verso.variables import VariableProvider
    from verso.view_helper.resolver import ViewHelperResolver


@dataclass
class RenderingContext:
    """Per-render state shared by nodes and view helpers.

    Attributes:
        variable_provider: User-visible variables for the current scope
        view_helper_resolver: Resolves tags and hands out the invoker
        view_helper_variable_container: Named-slot registry for this pass
        template: Template being rendered (renders named sections)
        section_stack: Names of sections currently being rendered, outermost first
        max_section_depth: Recursion guard for section rendering
    """

    variable_provider: VariableProvider
    view_helper_resolver: ViewHelperResolver
    view_helper_variable_container: ViewHelperVariableContainer = field(
        default_factory=ViewHelperVariableContainer
    )
    template: Template | None = None

    # Recursive sections (a menu rendering its sub-menus) nest one level per
    # call; 50 is deep enough for real data while stopping runaway recursion.
    section_stack: list[str] = field(default_factory=list)
    max_section_depth: int = 50

    @property
    def section_depth(self) -> int:
        return len(self.section_stack)

    def check_section_depth(self, name: str) -> None:
        """Raise if rendering section ``name`` would exceed the depth limit.

        Raises:
            SectionDepthError: If depth >= max_section_depth
        """
        if self.section_depth >= self.max_section_depth:
            raise SectionDepthError(
                name,
                self.max_section_depth,
                template_name=self.template.name if self.template else None,
            )

    def child_context(self, section: str, variables: Mapping[str, Any]) -> RenderingContext:
        """Create the context for rendering section ``section`` with ``variables``.

        The child gets a new variable scope (see
        ``VariableProvider.get_scope_copy``) and shares the slot registry,
        resolver and template with this context.
        """
        return RenderingContext(
            variable_provider=self.variable_provider.get_scope_copy(variables),
            view_helper_resolver=self.view_helper_resolver,
            view_helper_variable_container=self.view_helper_variable_container,
            template=self.template,
            section_stack=[*self.section_stack, section],
            max_section_depth=self.max_section_depth,
        )
