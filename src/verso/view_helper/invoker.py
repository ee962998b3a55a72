"""ViewHelperInvoker — bind arguments and run a view helper.

Both rendering strategies end up here: interpreted ``ViewHelperNode``
evaluation and compiled ``ViewHelper.render_static()`` calls. Keeping a
single entry point is what makes the two modes produce identical output.

Invocation steps:
1. Create a transient instance (or reset a supplied one)
2. Resolve argument definitions through the argument cache
3. Bind values: supplied, else default; required arguments must be supplied
4. Hand undeclared arguments to ``handle_additional_arguments()``
5. Wire context, node and children closure
6. ``initialize_arguments_and_render()``: validate → initialize → render

Steps 1-5 are available on their own as ``prepare()``, for callers that only
need binding and validation.

"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from verso.environment.exceptions import MissingRequiredArgumentError
from verso.view_helper.cache import DEFAULT_ARGUMENT_CACHE, ArgumentDefinitionCache

if TYPE_CHECKING:
    from verso.nodes import ViewHelperNode
    from verso.render_context import RenderingContext
    from verso.view_helper.arguments import ArgumentDefinition
    from verso.view_helper.core import RenderChildrenClosure, ViewHelper


class ViewHelperInvoker:
    """Invokes view helpers with bound, validated arguments.

    Thread-Safety:
        Stateless apart from the argument cache, which is safe for
        concurrent use. One invoker is shared by every render of an
        Environment.

    Example:
            >>> invoker = ViewHelperInvoker()
            >>> invoker.invoke(GreetViewHelper, {"name": "Ada"}, rendering_context)
            'Hello Ada'

    """

    __slots__ = ("_argument_cache",)

    def __init__(self, argument_cache: ArgumentDefinitionCache | None = None):
        self._argument_cache = (
            argument_cache if argument_cache is not None else DEFAULT_ARGUMENT_CACHE
        )

    @property
    def argument_cache(self) -> ArgumentDefinitionCache:
        return self._argument_cache

    def invoke(
        self,
        view_helper: type[ViewHelper] | ViewHelper,
        arguments: Mapping[str, Any],
        rendering_context: RenderingContext,
        render_children_closure: RenderChildrenClosure | None = None,
        node: ViewHelperNode | None = None,
    ) -> Any:
        """Invoke a view helper and return its output.

        Args:
            view_helper: View helper class, or an instance to reuse
            arguments: Evaluated argument values by name
            rendering_context: Active rendering context
            render_children_closure: Compiled children renderer (compiled mode)
            node: Node being evaluated (interpreted mode)

        Raises:
            MissingRequiredArgumentError: A required argument was not supplied
            UndeclaredArgumentError: An undeclared argument was supplied
            ArgumentTypeError: A value does not match its declared type
        """
        instance = self.prepare(
            view_helper, arguments, rendering_context, render_children_closure, node
        )
        return instance.initialize_arguments_and_render()

    def prepare(
        self,
        view_helper: type[ViewHelper] | ViewHelper,
        arguments: Mapping[str, Any],
        rendering_context: RenderingContext,
        render_children_closure: RenderChildrenClosure | None = None,
        node: ViewHelperNode | None = None,
    ) -> ViewHelper:
        """Return a view helper instance with bound arguments, ready to render.

        Arguments are bound but not yet validated; that happens in
        ``validate_arguments()``.
        """
        if isinstance(view_helper, type):
            instance = view_helper()
        else:
            instance = view_helper
            instance.reset_state()

        instance.set_argument_cache(self._argument_cache)
        definitions = instance.prepare_arguments()
        instance.set_arguments(self.bind_arguments(instance, definitions, arguments))

        undeclared = {name: value for name, value in arguments.items() if name not in definitions}
        if undeclared:
            instance.handle_additional_arguments(undeclared)

        instance.set_rendering_context(rendering_context)
        if node is not None:
            instance.set_view_helper_node(node)
        if render_children_closure is not None:
            instance.set_render_children_closure(render_children_closure)

        return instance

    def bind_arguments(
        self,
        view_helper: ViewHelper,
        definitions: Mapping[str, ArgumentDefinition],
        arguments: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Map every declared argument to its value for this invocation."""
        bound: dict[str, Any] = {}
        for name, definition in definitions.items():
            if name in arguments:
                bound[name] = arguments[name]
            elif definition.required:
                raise MissingRequiredArgumentError(name, view_helper)
            else:
                # Defaults live in the shared cache; never hand out the same object
                bound[name] = copy.copy(definition.default_value)
        return bound
