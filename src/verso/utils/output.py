"""Output joining shared by the interpreter and compiled templates.

Both rendering strategies must combine child results identically, so the
rule lives in one place:

- no children: ``None``
- one child: its value, untouched (view helpers may return non-strings)
- several children: their string forms concatenated, ``None`` as ``""``

"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def str_safe(value: Any) -> str:
    """Convert value to string, treating None as empty string."""
    if value is None:
        return ""
    return str(value)


def join_output(values: Sequence[Any]) -> Any:
    """Combine evaluated child values in document order."""
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return "".join([str_safe(value) for value in values])
