"""Verso templates: interpreted and compiled rendering of one node tree."""

from verso.template.core import CompiledTemplate, InterpretedTemplate, Template
from verso.template.helpers import STATIC_NAMESPACE

__all__ = ["STATIC_NAMESPACE", "CompiledTemplate", "InterpretedTemplate", "Template"]
