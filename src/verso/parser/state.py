"""ParsingState — builds node trees and fires post-parse hooks.

The template grammar is not part of Verso; a parser (or a test, or code that
assembles templates programmatically) builds trees through a ParsingState.
Trees are built bottom-up, so when ``view_helper()`` creates a node its whole
subtree already exists and the handler's ``post_parse_event`` can run
immediately, exactly once, before anything is rendered.

Example:
    >>> state = ParsingState(ViewHelperResolver())
    >>> state.root([
    ...     state.view_helper("f:section", {"name": "greeting"}, ["Hello ", state.accessor("name")]),
    ...     state.view_helper("f:render", {"section": "greeting", "arguments": state.array({"name": state.accessor("user")})}),
    ... ])
    >>> sorted(state.sections)
    ['greeting']

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from verso.environment.exceptions import TemplateSyntaxError
from verso.nodes import (
    ArrayNode,
    ConstantNode,
    Node,
    ObjectAccessorNode,
    RootNode,
    TextNode,
    ViewHelperNode,
)
from verso.variables import StandardVariableProvider, VariableProvider
from verso.view_helper.resolver import ViewHelperResolver
from verso.view_helpers.section import SECTIONS_VARIABLE


def as_node(value: Any) -> Node:
    """Wrap plain values: ``str`` → TextNode, anything else → ConstantNode."""
    if isinstance(value, Node):
        return value
    if isinstance(value, str):
        return TextNode(value)
    return ConstantNode(value)


class ParsingState:
    """Parse-time state: the node factory plus the parse-time variable scope.

    Attributes:
        variable_provider: Parse-time variables (holds ``sections``)
        root_node: Root set by ``root()``, or None while building
    """

    __slots__ = ("_resolver", "root_node", "variable_provider")

    def __init__(
        self,
        resolver: ViewHelperResolver | None = None,
        variable_provider: VariableProvider | None = None,
    ):
        self._resolver = resolver if resolver is not None else ViewHelperResolver()
        self.variable_provider: VariableProvider = (
            variable_provider if variable_provider is not None else StandardVariableProvider()
        )
        self.root_node: RootNode | None = None

    @property
    def sections(self) -> Mapping[str, ViewHelperNode]:
        """Sections registered so far, by name."""
        return dict(self.variable_provider.get(SECTIONS_VARIABLE) or {})

    def text(self, text: str) -> TextNode:
        return TextNode(text)

    def constant(self, value: Any) -> ConstantNode:
        return ConstantNode(value)

    def accessor(self, path: str) -> ObjectAccessorNode:
        return ObjectAccessorNode(path)

    def array(self, items: Mapping[str, Any]) -> ArrayNode:
        return ArrayNode({key: as_node(value) for key, value in items.items()})

    def view_helper(
        self,
        identifier: str | type,
        arguments: Mapping[str, Any] | None = None,
        children: Sequence[Any] = (),
    ) -> ViewHelperNode:
        """Build a view helper node and run its post-parse hook.

        Args:
            identifier: ``namespace:name`` tag or a ViewHelper subclass
            arguments: Argument nodes (plain values are wrapped)
            children: Child nodes (plain values are wrapped)
        """
        if isinstance(identifier, str):
            view_helper_class = self._resolver.resolve_view_helper_class(identifier)
            label = identifier
        else:
            view_helper_class = identifier
            label = identifier.__qualname__

        node = ViewHelperNode(
            view_helper_class,
            {name: as_node(value) for name, value in (arguments or {}).items()},
            tuple(as_node(child) for child in children),
            identifier=label,
        )
        view_helper_class.post_parse_event(node, node.arguments, self.variable_provider)
        return node

    def root(self, children: Sequence[Any]) -> RootNode:
        """Finish the tree."""
        if self.root_node is not None:
            raise TemplateSyntaxError("Template root has already been built")
        self.root_node = RootNode(tuple(as_node(child) for child in children))
        return self.root_node
