"""Names available to compiled template code.

Compiled modules run with an empty ``__builtins__``; everything they call is
either listed here or bound as a ``_ref_N`` reference by the compiler.
"""

from __future__ import annotations

from typing import Any

from verso.utils.output import join_output, str_safe

STATIC_NAMESPACE: dict[str, Any] = {
    "__builtins__": {},
    "_join_output": join_output,
    "_str_safe": str_safe,
}
