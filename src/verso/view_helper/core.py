"""ViewHelper — base class for all tag handlers.

A view helper declares typed arguments once per class, and renders either by
evaluating its children or by producing a value itself. The same handler
runs in two modes with identical results:

Interpreted:
    ``ViewHelperNode.evaluate()`` → ``ViewHelperInvoker.invoke()`` →
    ``initialize_arguments_and_render()`` → ``render()``. Children are
    evaluated by walking the node tree.

Compiled:
    ``TemplateCompiler`` calls ``compile()`` once per node. The default
    emits a call to ``render_static()``, which delegates to the invoker, so
    binding, validation and ``render()`` are shared with the interpreted
    path. Children are rendered by a compiled closure instead of a tree walk.

Writing a view helper:
    ```python
    class GreetViewHelper(ViewHelper):
        def initialize_arguments(self):
            self.register_argument("name", "string", "Who to greet", required=True)
            self.register_argument("shout", "boolean", "Upper-case output", default_value=False)

        def render(self):
            text = f"Hello {self.arguments['name']}"
            return text.upper() if self.arguments["shout"] else text
    ```

"""

from __future__ import annotations

import ast
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from verso.environment.exceptions import (
    DuplicateArgumentError,
    UndeclaredArgumentError,
)
from verso.nodes.base import Node, evaluate_child_nodes
from verso.view_helper.arguments import ArgumentDefinition, ArgumentType
from verso.view_helper.cache import DEFAULT_ARGUMENT_CACHE, ArgumentDefinitionCache

if TYPE_CHECKING:
    from verso.compiler.core import TemplateCompiler
    from verso.nodes import ViewHelperNode
    from verso.render_context import RenderingContext
    from verso.variables import VariableProvider
    from verso.view_helper.variable_container import ViewHelperVariableContainer

RenderChildrenClosure = Callable[[], Any]


class ViewHelper:
    """Base class for tag handlers.

    Instances are transient: one per invocation, created and wired by the
    invoker. Argument definitions are per class and cached.

    Escaping:
        ``escape_children`` and ``escape_output`` tell an escaping layer
        whether to post-process ``render_children()`` results and the final
        output. ``None`` (the default) means enabled; set ``False`` to opt out.

    Attributes:
        arguments: Bound argument values for this invocation
        argument_definitions: Declared arguments in declaration order
        view_helper_node: Node being rendered (interpreted mode)
        child_nodes: Child nodes of that node
        rendering_context: Active rendering context
        render_children_closure: Compiled children renderer (compiled mode)
    """

    escape_children: bool | None = None
    escape_output: bool | None = None

    def __init__(self) -> None:
        self.arguments: dict[str, Any] = {}
        self.argument_definitions: Mapping[str, ArgumentDefinition] = {}
        self.view_helper_node: ViewHelperNode | None = None
        self.child_nodes: Sequence[Node] = ()
        self.rendering_context: RenderingContext | None = None
        self.render_children_closure: RenderChildrenClosure | None = None
        self._argument_cache: ArgumentDefinitionCache = DEFAULT_ARGUMENT_CACHE

    # ─────────────────────────────────────────────────────────────────────
    # Wiring (called by the invoker)
    # ─────────────────────────────────────────────────────────────────────

    def set_arguments(self, arguments: dict[str, Any]) -> None:
        self.arguments = arguments

    def set_argument_cache(self, argument_cache: ArgumentDefinitionCache) -> None:
        self._argument_cache = argument_cache

    def set_rendering_context(self, rendering_context: RenderingContext) -> None:
        self.rendering_context = rendering_context

    def set_view_helper_node(self, node: ViewHelperNode) -> None:
        self.view_helper_node = node
        self.child_nodes = node.children

    def set_child_nodes(self, child_nodes: Sequence[Node]) -> None:
        self.child_nodes = child_nodes

    def set_render_children_closure(self, closure: RenderChildrenClosure) -> None:
        self.render_children_closure = closure

    def reset_state(self) -> None:
        """Return to a clean state before an instance is reused.

        Override if your view helper keeps state beyond the wired attributes.
        """
        self.arguments = {}
        self.view_helper_node = None
        self.child_nodes = ()
        self.rendering_context = None
        self.render_children_closure = None

    @property
    def variable_provider(self) -> VariableProvider:
        return self._require_context().variable_provider

    @property
    def view_helper_variable_container(self) -> ViewHelperVariableContainer:
        return self._require_context().view_helper_variable_container

    def _require_context(self) -> RenderingContext:
        if self.rendering_context is None:
            raise RuntimeError(f"{type(self).__qualname__} has no rendering context")
        return self.rendering_context

    def is_children_escaping_enabled(self) -> bool:
        return self.escape_children is not False

    def is_output_escaping_enabled(self) -> bool:
        return self.escape_output is not False

    # ─────────────────────────────────────────────────────────────────────
    # Argument declaration
    # ─────────────────────────────────────────────────────────────────────

    def initialize_arguments(self) -> None:
        """Declare arguments. Override and call ``register_argument()`` here."""

    def register_argument(
        self,
        name: str,
        type: str | ArgumentType | type,
        description: str,
        required: bool = False,
        default_value: Any = None,
    ) -> ViewHelper:
        """Declare a new argument.

        Returns:
            self, to allow chaining

        Raises:
            DuplicateArgumentError: If ``name`` is already declared
        """
        if name in self.argument_definitions:
            raise DuplicateArgumentError(name, self)
        self._declared()[name] = ArgumentDefinition(
            name, type, description, required, default_value
        )
        return self

    def override_argument(
        self,
        name: str,
        type: str | ArgumentType | type,
        description: str,
        required: bool = False,
        default_value: Any = None,
    ) -> ViewHelper:
        """Replace a previously declared argument, keeping its position.

        Returns:
            self, to allow chaining

        Raises:
            UndeclaredArgumentError: If ``name`` was never declared
        """
        if name not in self.argument_definitions:
            raise UndeclaredArgumentError(name, self)
        self._declared()[name] = ArgumentDefinition(
            name, type, description, required, default_value
        )
        return self

    def _declared(self) -> dict[str, ArgumentDefinition]:
        # Cached definitions are read-only; declaring starts from a private copy
        if not isinstance(self.argument_definitions, dict):
            self.argument_definitions = dict(self.argument_definitions)
        return self.argument_definitions

    def prepare_arguments(self) -> Mapping[str, ArgumentDefinition]:
        """Return this class's argument definitions, declaring them on first use."""
        self.argument_definitions = self._argument_cache.get_or_build(
            type(self), self._build_argument_definitions
        )
        return self.argument_definitions

    def _build_argument_definitions(self) -> dict[str, ArgumentDefinition]:
        self.argument_definitions = {}
        self.initialize_arguments()
        return self._declared()

    def handle_additional_arguments(self, arguments: Mapping[str, Any]) -> None:
        """Receive arguments that were passed but never declared.

        The default rejects them. Override to accept free-form arguments
        (e.g. HTML attributes), typically by merging them into ``self.arguments``.

        Raises:
            UndeclaredArgumentError: For the first undeclared argument
        """
        name = next(iter(arguments))
        raise UndeclaredArgumentError(name, self, declared=tuple(self.argument_definitions))

    def has_argument(self, name: str) -> bool:
        """True if ``name`` is bound to a value other than None."""
        return self.arguments.get(name) is not None

    def validate_arguments(self) -> None:
        """Check every bound argument against its declared type.

        Raises:
            ArgumentTypeError: On the first incompatible value
        """
        for name, definition in self.prepare_arguments().items():
            if self.has_argument(name):
                definition.validate(self.arguments[name], self)

    # ─────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────

    def initialize_arguments_and_render(self) -> Any:
        """Validate arguments, run ``initialize()`` and render."""
        self.validate_arguments()
        self.initialize()
        return self.call_render_method()

    def call_render_method(self) -> Any:
        return self.render()

    def initialize(self) -> None:
        """Pre-render hook; runs after validation. No-op by default."""

    def render(self) -> Any:
        """Produce this tag's output. The default renders the children."""
        return self.render_children()

    def render_children(self) -> Any:
        """Render everything between the opening and closing tag.

        Uses the compiled closure when one was supplied, otherwise walks the
        child nodes. Both produce the same value.
        """
        if self.render_children_closure is not None:
            return self.render_children_closure()
        return evaluate_child_nodes(self.child_nodes, self._require_context())

    def build_render_children_closure(self) -> RenderChildrenClosure:
        """Package ``render_children()`` as a closure, e.g. for ``render_static()``."""
        return lambda: self.render_children()

    # ─────────────────────────────────────────────────────────────────────
    # Compilation and parse-time hooks
    # ─────────────────────────────────────────────────────────────────────

    def compile(
        self,
        arguments_name: str,
        closure_name: str,
        initialization: list[ast.stmt],
        node: ViewHelperNode,
        compiler: TemplateCompiler,
    ) -> ast.expr:
        """Return the expression that renders ``node`` in compiled templates.

        Called once per node at compile time. Override only when the output
        can be produced more cheaply than through ``render_static()`` with
        exactly the same result.

        Args:
            arguments_name: Name of the local dict holding evaluated arguments
            closure_name: Name of the local children-rendering closure
            initialization: Statements to emit before the expression
            node: Node being compiled
            compiler: Compiler, for ``reference()`` and ``context_name``

        Returns:
            Python expression evaluating to this node's output
        """
        return self.compile_render_static(arguments_name, closure_name, compiler)

    def compile_render_static(
        self, arguments_name: str, closure_name: str, compiler: TemplateCompiler
    ) -> ast.expr:
        """Return ``<cls>.render_static(<arguments>, <closure>, _ctx)``."""
        return ast.Call(
            func=ast.Attribute(
                value=compiler.reference(type(self)),
                attr="render_static",
                ctx=ast.Load(),
            ),
            args=[
                ast.Name(id=arguments_name, ctx=ast.Load()),
                ast.Name(id=closure_name, ctx=ast.Load()),
                ast.Name(id=compiler.context_name, ctx=ast.Load()),
            ],
            keywords=[],
        )

    @classmethod
    def render_static(
        cls,
        arguments: Mapping[str, Any],
        render_children_closure: RenderChildrenClosure,
        rendering_context: RenderingContext,
    ) -> Any:
        """Compiled-mode entry point; same semantics as the interpreted path."""
        invoker = rendering_context.view_helper_resolver.resolve_view_helper_invoker(cls)
        return invoker.invoke(cls, arguments, rendering_context, render_children_closure)

    @classmethod
    def validate_static(
        cls, arguments: Mapping[str, Any], rendering_context: RenderingContext
    ) -> None:
        """Bind and validate ``arguments`` without rendering.

        Emitted by handlers whose ``compile()`` returns a constant, so argument
        errors surface exactly as they would through ``render_static()``.
        """
        invoker = rendering_context.view_helper_resolver.resolve_view_helper_invoker(cls)
        invoker.prepare(cls, arguments, rendering_context).validate_arguments()

    @classmethod
    def post_parse_event(
        cls,
        node: ViewHelperNode,
        arguments: Mapping[str, Node],
        variable_provider: VariableProvider,
    ) -> None:
        """Called once, right after ``node`` and its subtree are built."""

    def __repr__(self) -> str:
        return f"<{type(self).__qualname__} arguments={self.arguments!r}>"
