"""Value nodes: text, constants, variable accessors and arrays."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from verso.nodes.base import Node

if TYPE_CHECKING:
    from verso.render_context import RenderingContext


@dataclass(frozen=True, slots=True)
class TextNode(Node):
    """Literal template text. Also the form of literal tag arguments."""

    text: str

    def evaluate(self, rendering_context: RenderingContext) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class ConstantNode(Node):
    """A constant value (number, boolean, None, or any object)."""

    value: Any

    def evaluate(self, rendering_context: RenderingContext) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class ObjectAccessorNode(Node):
    """Variable lookup by dotted path: {user.address.city}"""

    path: str

    def evaluate(self, rendering_context: RenderingContext) -> Any:
        return rendering_context.variable_provider.get_by_path(self.path)


@dataclass(frozen=True, slots=True, eq=False)
class ArrayNode(Node):
    """Array literal: {key: value, other: variable}"""

    items: Mapping[str, Node]

    def evaluate(self, rendering_context: RenderingContext) -> dict[str, Any]:
        return {key: node.evaluate(rendering_context) for key, node in self.items.items()}
