"""Base node class for the Verso node tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from verso.utils.output import join_output

if TYPE_CHECKING:
    from verso.render_context import RenderingContext


@dataclass(frozen=True, slots=True, eq=False)
class Node:
    """Base class for all nodes.

    Nodes are immutable and evaluable: ``evaluate()`` produces the node's
    value (usually a string) for one rendering context. Source positions are
    optional since trees can be built programmatically.

    The base class compares by identity; leaf nodes opt into value equality.

    """

    lineno: int = field(default=0, kw_only=True)
    col_offset: int = field(default=0, kw_only=True)

    def evaluate(self, rendering_context: RenderingContext) -> Any:
        raise NotImplementedError(f"{type(self).__name__} cannot be evaluated")


def evaluate_child_nodes(
    children: Sequence[Node], rendering_context: RenderingContext
) -> Any:
    """Evaluate children in document order and join their results."""
    return join_output([child.evaluate(rendering_context) for child in children])
