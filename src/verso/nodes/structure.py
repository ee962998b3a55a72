"""Structural nodes: the tree root and view helper tags.

Both compare by identity (``eq=False``): a ViewHelperNode registered as a
section must be the very node that is later evaluated.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from verso.nodes.base import Node, evaluate_child_nodes

if TYPE_CHECKING:
    from verso.render_context import RenderingContext


@dataclass(frozen=True, slots=True, eq=False)
class RootNode(Node):
    """Root node representing a complete template."""

    children: Sequence[Node]

    def evaluate(self, rendering_context: RenderingContext) -> Any:
        return evaluate_child_nodes(self.children, rendering_context)


@dataclass(frozen=True, slots=True, eq=False)
class ViewHelperNode(Node):
    """A view helper tag: <f:render section="menu" arguments="{items: menu}" />

    Attributes:
        view_helper_class: ViewHelper subclass handling this tag
        arguments: Argument name → unevaluated argument node
        children: Child nodes between the opening and closing tag
        identifier: Tag name as written (e.g. ``"f:section"``), for messages
    """

    view_helper_class: type
    arguments: Mapping[str, Node]
    children: Sequence[Node] = ()
    identifier: str | None = None

    def evaluate(self, rendering_context: RenderingContext) -> Any:
        """Evaluate arguments, then invoke the view helper (interpreted path)."""
        arguments = {
            name: node.evaluate(rendering_context) for name, node in self.arguments.items()
        }
        invoker = rendering_context.view_helper_resolver.resolve_view_helper_invoker(
            self.view_helper_class
        )
        return invoker.invoke(self.view_helper_class, arguments, rendering_context, node=self)

    def __repr__(self) -> str:
        label = self.identifier or self.view_helper_class.__qualname__
        return f"<ViewHelperNode {label} args={list(self.arguments)} children={len(self.children)}>"
