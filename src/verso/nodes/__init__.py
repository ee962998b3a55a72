"""Verso node tree.

Nodes are immutable frozen dataclasses produced by the parser (or by
``ParsingState`` when trees are built programmatically). Every node can be
evaluated directly; ``TemplateCompiler`` turns the same tree into Python code.

Node Types:
    Node             Base class
    TextNode         Literal text
    ConstantNode     Constant value
    ObjectAccessorNode  Dotted variable path
    ArrayNode        Mapping of key → node
    RootNode         Template root
    ViewHelperNode   View helper tag with arguments and children

"""

from verso.nodes.base import Node, evaluate_child_nodes
from verso.nodes.expressions import ArrayNode, ConstantNode, ObjectAccessorNode, TextNode
from verso.nodes.structure import RootNode, ViewHelperNode

__all__ = [
    "ArrayNode",
    "ConstantNode",
    "Node",
    "ObjectAccessorNode",
    "RootNode",
    "TextNode",
    "ViewHelperNode",
    "evaluate_child_nodes",
]
