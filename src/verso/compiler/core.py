"""Verso TemplateCompiler — node tree to Python code object.

The compiler builds an ``ast.Module`` directly (no source strings) and
compiles it with ``compile(..., "exec")``. The module defines one
``render(_ctx)`` function for the template root and one ``_section_N(_ctx)``
function per registered section.

StringBuilder output, as in the generated code below: each function
collects child values in ``buf`` and returns ``_join_output(buf)``, the
same joining rule the interpreter uses.

View helper nodes:
    ```python
    def render(_ctx):
        buf = []
        _append = buf.append
        _append('Hello ')
        def _children_0():
            buf = []
            _append = buf.append
            _append(_ctx.variable_provider.get_by_path('user.name'))
            return _join_output(buf)
        _args_0 = {'section': 'greeting'}
        _append(_ref_0.render_static(_args_0, _children_0, _ctx))
        return _join_output(buf)
    ```

The expression appended for a view helper comes from its ``compile()``
method; the default calls ``render_static()``.

Section functions always render the section node through
``render_static()``, bypassing the handler's ``compile()``: the caller sets
the rendering flag first, exactly as for interpreted sections.

Objects the code refers to (view helper classes, non-literal constants) are
bound in the module namespace as ``_ref_N`` names, see ``references``.

"""

from __future__ import annotations

import ast
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from verso.nodes import (
    ArrayNode,
    ConstantNode,
    Node,
    ObjectAccessorNode,
    RootNode,
    TextNode,
    ViewHelperNode,
)

if TYPE_CHECKING:
    import types

logger = logging.getLogger(__name__)

_LITERAL_TYPES = (str, int, float, bool, type(None))


@dataclass(frozen=True, slots=True)
class CompiledModule:
    """Result of compiling one template.

    Attributes:
        code: Code object defining ``render`` and the section functions
        references: ``_ref_N`` name → object, to be bound before ``exec()``
        sections: Section name → generated function name
    """

    code: types.CodeType
    references: Mapping[str, Any]
    sections: Mapping[str, str] = field(default_factory=dict)


class TemplateCompiler:
    """Compile a Verso node tree into a Python code object.

    Node Dispatch:
        O(1) dict lookup from node type name to handler. Node types without
        a handler fall back to ``node.evaluate(_ctx)`` through a reference,
        so custom nodes keep working in compiled templates.

    Example:
            >>> compiler = TemplateCompiler()
            >>> compiled = compiler.compile(root, sections, name="page")
            >>> namespace = {**STATIC_NAMESPACE, **compiled.references}
            >>> exec(compiled.code, namespace)
            >>> namespace["render"](rendering_context)

    """

    context_name = "_ctx"

    __slots__ = (
        "_closure_counter",
        "_counter",
        "_node_dispatch",
        "_reference_ids",
        "_references",
    )

    def __init__(self) -> None:
        self._counter = 0
        self._closure_counter = 0
        self._references: dict[str, Any] = {}
        self._reference_ids: dict[int, str] = {}
        self._node_dispatch: dict[str, Callable[[Any, list[ast.stmt]], ast.expr]] = {
            "TextNode": self._compile_text,
            "ConstantNode": self._compile_constant,
            "ObjectAccessorNode": self._compile_accessor,
            "ArrayNode": self._compile_array,
            "ViewHelperNode": self._compile_view_helper,
            "RootNode": self._compile_root,
        }

    def compile(
        self,
        root: RootNode,
        sections: Mapping[str, ViewHelperNode] | None = None,
        name: str | None = None,
    ) -> CompiledModule:
        """Compile a template root and its sections.

        Args:
            root: Template root node
            sections: Registered sections by name
            name: Template name, used as the code object's filename

        Returns:
            CompiledModule ready for ``exec()``
        """
        self._counter = 0
        self._closure_counter = 0
        self._references = {}
        self._reference_ids = {}

        module_body: list[ast.stmt] = [
            self._make_function("render", root.children, takes_context=True)
        ]
        section_functions: dict[str, str] = {}
        for index, (section_name, node) in enumerate((sections or {}).items()):
            function_name = f"_section_{index}"
            module_body.append(self._make_section_function(function_name, node))
            section_functions[section_name] = function_name

        module = ast.Module(body=module_body, type_ignores=[])
        ast.fix_missing_locations(module)
        code = compile(module, name or "<template>", "exec")
        logger.debug(
            "Compiled template %s: %d view helper node(s), %d section(s)",
            name or "<template>",
            self._counter,
            len(section_functions),
        )
        return CompiledModule(
            code=code,
            references=dict(self._references),
            sections=section_functions,
        )

    def reference(self, obj: Any) -> ast.Name:
        """Return a name expression bound to ``obj`` in the module namespace."""
        key = id(obj)
        ref_name = self._reference_ids.get(key)
        if ref_name is None:
            ref_name = f"_ref_{len(self._references)}"
            self._reference_ids[key] = ref_name
            self._references[ref_name] = obj
        return ast.Name(id=ref_name, ctx=ast.Load())

    # ─────────────────────────────────────────────────────────────────────
    # Functions and bodies
    # ─────────────────────────────────────────────────────────────────────

    def _make_function(
        self, name: str, children: Sequence[Node], *, takes_context: bool
    ) -> ast.FunctionDef:
        """Generate ``def name(_ctx)`` (or a no-argument closure) rendering children."""
        body: list[ast.stmt] = [
            # buf = []
            ast.Assign(
                targets=[ast.Name(id="buf", ctx=ast.Store())],
                value=ast.List(elts=[], ctx=ast.Load()),
            ),
            # _append = buf.append
            ast.Assign(
                targets=[ast.Name(id="_append", ctx=ast.Store())],
                value=ast.Attribute(
                    value=ast.Name(id="buf", ctx=ast.Load()),
                    attr="append",
                    ctx=ast.Load(),
                ),
            ),
        ]
        for child in children:
            expr = self._compile_node(child, body)
            body.append(
                ast.Expr(
                    value=ast.Call(
                        func=ast.Name(id="_append", ctx=ast.Load()),
                        args=[expr],
                        keywords=[],
                    )
                )
            )
        # return _join_output(buf)
        body.append(
            ast.Return(
                value=ast.Call(
                    func=ast.Name(id="_join_output", ctx=ast.Load()),
                    args=[ast.Name(id="buf", ctx=ast.Load())],
                    keywords=[],
                )
            )
        )

        params = [ast.arg(arg=self.context_name)] if takes_context else []
        return ast.FunctionDef(
            name=name,
            args=ast.arguments(
                posonlyargs=[],
                args=params,
                vararg=None,
                kwonlyargs=[],
                kw_defaults=[],
                kwarg=None,
                defaults=[],
            ),
            body=body,
            decorator_list=[],
            returns=None,
            type_params=[],
        )

    def _make_section_function(self, name: str, node: ViewHelperNode) -> ast.FunctionDef:
        """Generate ``def name(_ctx)`` returning the section node's raw output."""
        function = self._make_function(name, (), takes_context=True)
        # Replace "return _join_output(buf)" with the node's own render call
        function.body.pop()
        expr = self._compile_view_helper(node, function.body, render_static=True)
        function.body.append(ast.Return(value=expr))
        return function

    def _compile_node(self, node: Node, stmts: list[ast.stmt]) -> ast.expr:
        """Compile ``node`` to an expression.

        Statements the expression depends on (closures, argument dicts) are
        appended to ``stmts`` so they run right before the expression, in
        document order.
        """
        handler = self._node_dispatch.get(type(node).__name__)
        if handler is None:
            return self._compile_fallback(node, stmts)
        return handler(node, stmts)

    # ─────────────────────────────────────────────────────────────────────
    # Node handlers
    # ─────────────────────────────────────────────────────────────────────

    def _compile_text(self, node: TextNode, stmts: list[ast.stmt]) -> ast.expr:
        return ast.Constant(value=node.text)

    def _compile_constant(self, node: ConstantNode, stmts: list[ast.stmt]) -> ast.expr:
        if isinstance(node.value, _LITERAL_TYPES):
            return ast.Constant(value=node.value)
        return self.reference(node.value)

    def _compile_accessor(self, node: ObjectAccessorNode, stmts: list[ast.stmt]) -> ast.expr:
        # _ctx.variable_provider.get_by_path('a.b')
        return ast.Call(
            func=ast.Attribute(
                value=ast.Attribute(
                    value=ast.Name(id=self.context_name, ctx=ast.Load()),
                    attr="variable_provider",
                    ctx=ast.Load(),
                ),
                attr="get_by_path",
                ctx=ast.Load(),
            ),
            args=[ast.Constant(value=node.path)],
            keywords=[],
        )

    def _compile_array(self, node: ArrayNode, stmts: list[ast.stmt]) -> ast.expr:
        keys: list[ast.expr | None] = []
        values: list[ast.expr] = []
        for key, value in node.items.items():
            keys.append(ast.Constant(value=key))
            values.append(self._compile_node(value, stmts))
        return ast.Dict(keys=keys, values=values)

    def _compile_root(self, node: RootNode, stmts: list[ast.stmt]) -> ast.expr:
        closure_name = self._next_name("_root")
        stmts.append(self._make_function(closure_name, node.children, takes_context=False))
        return ast.Call(func=ast.Name(id=closure_name, ctx=ast.Load()), args=[], keywords=[])

    def _compile_view_helper(
        self, node: ViewHelperNode, stmts: list[ast.stmt], *, render_static: bool = False
    ) -> ast.expr:
        """Emit ``_args_N``, the ``_children_N`` closure, and the handler's expression.

        With ``render_static`` the handler's ``compile()`` is skipped in favour
        of the default ``render_static()`` call.
        """
        index = self._counter
        self._counter += 1
        arguments_name = f"_args_{index}"
        closure_name = f"_children_{index}"

        keys: list[ast.expr | None] = []
        values: list[ast.expr] = []
        for name, argument in node.arguments.items():
            keys.append(ast.Constant(value=name))
            values.append(self._compile_node(argument, stmts))

        stmts.append(self._make_function(closure_name, node.children, takes_context=False))
        stmts.append(
            ast.Assign(
                targets=[ast.Name(id=arguments_name, ctx=ast.Store())],
                value=ast.Dict(keys=keys, values=values),
            )
        )

        view_helper = node.view_helper_class()
        if render_static:
            return view_helper.compile_render_static(arguments_name, closure_name, self)

        initialization: list[ast.stmt] = []
        expr = view_helper.compile(arguments_name, closure_name, initialization, node, self)
        stmts.extend(initialization)
        return expr

    def _compile_fallback(self, node: Node, stmts: list[ast.stmt]) -> ast.expr:
        # <ref>.evaluate(_ctx)
        return ast.Call(
            func=ast.Attribute(value=self.reference(node), attr="evaluate", ctx=ast.Load()),
            args=[ast.Name(id=self.context_name, ctx=ast.Load())],
            keywords=[],
        )

    def _next_name(self, prefix: str) -> str:
        index = self._closure_counter
        self._closure_counter += 1
        return f"{prefix}_{index}"
