"""Terminal colors for Verso error messages.

ANSI codes are applied only when stdout is a TTY, unless overridden by
``FORCE_COLOR`` (always on) or ``NO_COLOR`` (always off).
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "magenta": "\033[35m",
    "bright_red": "\033[91m",
}

ColorName = Literal[
    "reset", "bold", "dim", "cyan", "green", "magenta", "bright_red"
]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Decide once per process whether error output is colored."""
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Return True if error messages are colored."""
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Wrap ``text`` in the given ANSI colors, or return it unchanged.

    Example:
        >>> colorize("name", "cyan")
        '\\033[36mname\\033[0m'  # if colors supported
        'name'                  # otherwise
    """
    if not _USE_COLORS or not colors:
        return text
    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences from ``text``."""
    return _ANSI_ESCAPE.sub("", text)


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def argument(text: str) -> str:
    """Color a view helper argument name (bold)."""
    return colorize(text, "bold")


def type_name(text: str) -> str:
    """Color a declared or actual type name (magenta)."""
    return colorize(text, "magenta")


def hint(text: str) -> str:
    return colorize(text, "green")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def format_error_header(code: str | None, message: str) -> str:
    """Prefix ``message`` with a colored error code when one is given.

    Example:
        >>> format_error_header("V-ARG-003", "Argument type mismatch")
        '\\033[91m\\033[1mV-ARG-003\\033[0m: Argument type mismatch'
    """
    if code:
        return f"{error_code(code)}: {message}"
    return message
