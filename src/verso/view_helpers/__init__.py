"""Built-in view helpers (the ``f`` namespace)."""

from verso.view_helpers.render import RenderViewHelper
from verso.view_helpers.section import SECTIONS_VARIABLE, SectionViewHelper

__all__ = ["SECTIONS_VARIABLE", "RenderViewHelper", "SectionViewHelper"]
