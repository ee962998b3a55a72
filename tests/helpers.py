"""View helpers used across the Verso test suite."""

from __future__ import annotations

from typing import Any

from verso import ViewHelper


class GreetViewHelper(ViewHelper):
    """Greets ``name``, optionally shouting."""

    def initialize_arguments(self) -> None:
        self.register_argument("name", "string", "Who to greet", required=True)
        self.register_argument("shout", "boolean", "Upper-case output", default_value=False)

    def render(self) -> Any:
        text = f"Hello {self.arguments['name']}"
        return text.upper() if self.arguments["shout"] else text


class ShoutingGreetViewHelper(GreetViewHelper):
    """Greet with ``shout`` defaulting to True."""

    def initialize_arguments(self) -> None:
        super().initialize_arguments()
        self.override_argument("shout", "boolean", "Upper-case output", default_value=True)


class WrapViewHelper(ViewHelper):
    """Wraps its children in brackets."""

    def render(self) -> Any:
        return f"[{self.render_children() or ''}]"


class IfViewHelper(ViewHelper):
    """Renders children when ``condition`` is truthy."""

    escape_output = False

    def initialize_arguments(self) -> None:
        self.register_argument("condition", "mixed", "Condition", required=True)

    def render(self) -> Any:
        if self.arguments["condition"]:
            return self.render_children()
        return ""


class CountViewHelper(ViewHelper):
    """Returns a non-string value."""

    def initialize_arguments(self) -> None:
        self.register_argument("items", "array", "Items to count", default_value=[])

    def render(self) -> Any:
        return len(self.arguments["items"])


class AttributesViewHelper(ViewHelper):
    """Accepts undeclared arguments as free-form attributes."""

    escape_children = False

    def initialize_arguments(self) -> None:
        self.register_argument("tag", "string", "Element name", default_value="span")

    def handle_additional_arguments(self, arguments: Any) -> None:
        self.arguments["attributes"] = dict(arguments)

    def render(self) -> Any:
        attributes = "".join(
            f' {name}="{value}"' for name, value in sorted(self.arguments.get("attributes", {}).items())
        )
        tag = self.arguments["tag"]
        return f"<{tag}{attributes}>{self.render_children() or ''}</{tag}>"


class DuplicateArgumentViewHelper(ViewHelper):
    """Declares the same argument twice."""

    def initialize_arguments(self) -> None:
        self.register_argument("value", "string", "First")
        self.register_argument("value", "string", "Second")


class OverrideUnknownViewHelper(ViewHelper):
    """Overrides an argument that was never declared."""

    def initialize_arguments(self) -> None:
        self.override_argument("value", "string", "Never declared")


def build(env: Any, state: Any, mode: str, name: str | None = None) -> Any:
    """Create a template from ``state`` using the given strategy."""
    return env.from_state(state, name=name, compiled=mode == "compiled")


class PlainViewHelper:
    """Named like a view helper but not a ViewHelper subclass."""
