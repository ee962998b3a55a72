"""Parse-time tree building for Verso."""

from verso.parser.state import ParsingState, as_node

__all__ = ["ParsingState", "as_node"]
