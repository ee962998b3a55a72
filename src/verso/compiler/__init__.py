"""Verso compiler — node tree to Python code objects.

See ``verso.compiler.core`` for the generated code layout.
"""

from verso.compiler.core import CompiledModule, TemplateCompiler

__all__ = ["CompiledModule", "TemplateCompiler"]
