"""ViewHelperResolver — map tag identifiers to view helper classes.

Tags are written ``namespace:path``. The namespace selects a Python package
and the path names a class inside it:

    f:section       → verso.view_helpers.SectionViewHelper
    f:render        → verso.view_helpers.RenderViewHelper
    app:user_card   → <app package>.UserCardViewHelper
    app:format.raw  → <app package>.format.RawViewHelper

Namespaces and resolved classes are stored copy-on-write, so lookups never
lock and a resolver can be shared by concurrent renders.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from importlib import import_module
from typing import TYPE_CHECKING

from verso.environment.exceptions import UnknownViewHelperError
from verso.view_helper.invoker import ViewHelperInvoker

if TYPE_CHECKING:
    from verso.view_helper.core import ViewHelper

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACES: Mapping[str, str] = {"f": "verso.view_helpers"}

CLASS_SUFFIX = "ViewHelper"


def view_helper_class_path(package: str, name: str) -> tuple[str, str]:
    """Return ``(module_path, class_name)`` for a tag path inside ``package``.

    Example:
        >>> view_helper_class_path("app.view_helpers", "format.raw")
        ('app.view_helpers.format', 'RawViewHelper')
    """
    *modules, last = name.split(".")
    class_name = "".join(part[:1].upper() + part[1:] for part in last.split("_"))
    module_path = ".".join([package, *modules])
    return module_path, class_name + CLASS_SUFFIX


class ViewHelperResolver:
    """Resolves tag identifiers to classes and hands out the invoker.

    Example:
            >>> resolver = ViewHelperResolver()
            >>> resolver.add_namespace("app", "myapp.view_helpers")
            >>> resolver.resolve_view_helper_class("app:card")
            <class 'myapp.view_helpers.CardViewHelper'>

    """

    __slots__ = ("_invoker", "_namespaces", "_resolved")

    def __init__(
        self,
        namespaces: Mapping[str, str] | None = None,
        invoker: ViewHelperInvoker | None = None,
    ):
        self._namespaces: dict[str, str] = dict(DEFAULT_NAMESPACES)
        if namespaces:
            self._namespaces.update(namespaces)
        self._resolved: dict[str, type[ViewHelper]] = {}
        self._invoker = invoker if invoker is not None else ViewHelperInvoker()

    @property
    def namespaces(self) -> Mapping[str, str]:
        return self._namespaces.copy()

    def add_namespace(self, name: str, package: str) -> None:
        """Register (or replace) a namespace → package mapping."""
        new = self._namespaces.copy()
        new[name] = package
        self._namespaces = new
        # Identifiers in this namespace may now resolve differently
        self._resolved = {
            key: cls for key, cls in self._resolved.items() if not key.startswith(f"{name}:")
        }

    def is_namespace_valid(self, name: str) -> bool:
        return name in self._namespaces

    def resolve_view_helper_class(self, identifier: str) -> type[ViewHelper]:
        """Resolve ``namespace:path`` to a ViewHelper subclass.

        Raises:
            UnknownViewHelperError: Unknown namespace, missing module or
                class, or a class that is not a ViewHelper
        """
        cls = self._resolved.get(identifier)
        if cls is not None:
            return cls

        namespace, sep, name = identifier.partition(":")
        if not sep or not name:
            raise UnknownViewHelperError(identifier)
        package = self._namespaces.get(namespace)
        if package is None:
            raise UnknownViewHelperError(identifier, f"namespace '{namespace}'")

        module_path, class_name = view_helper_class_path(package, name)
        candidate = f"{module_path}.{class_name}"
        try:
            module = import_module(module_path)
        except ModuleNotFoundError as e:
            # Only the view helper module itself (or a parent) may be missing
            if e.name is None or not (module_path + ".").startswith(e.name + "."):
                raise
            raise UnknownViewHelperError(identifier, candidate) from e
        cls = getattr(module, class_name, None)

        from verso.view_helper.core import ViewHelper

        if not (isinstance(cls, type) and issubclass(cls, ViewHelper)):
            raise UnknownViewHelperError(identifier, candidate)

        resolved = self._resolved.copy()
        resolved[identifier] = cls
        self._resolved = resolved
        logger.debug("Resolved view helper %s to %s", identifier, candidate)
        return cls

    def resolve_view_helper_invoker(self, view_helper_class: type) -> ViewHelperInvoker:
        """Return the invoker responsible for ``view_helper_class``."""
        return self._invoker
