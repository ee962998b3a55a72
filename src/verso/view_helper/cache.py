"""Process-wide cache of view helper argument definitions.

Declaring arguments means instantiating the view helper and running its
``initialize_arguments()``; the result depends only on the class, so it is
computed once per class and shared by every later invocation.

Thread-Safety:
    Readers never lock. A definition table is fully built before it is
    published, and publishing swaps in a new dict (copy-on-write) under a
    writer lock, so no reader observes a partially populated entry. Racing
    first uses build identical tables and the last writer wins.

"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from verso.view_helper.arguments import ArgumentDefinition

logger = logging.getLogger(__name__)

Definitions = Mapping[str, "ArgumentDefinition"]


class ArgumentDefinitionCache:
    """Mapping of view helper class → read-only, ordered argument definitions.

    The cache is an explicit object: an ``Environment`` owns one (the shared
    ``DEFAULT_ARGUMENT_CACHE`` unless configured otherwise) and hands it to
    the invoker, which hands it to each view helper instance.

    Example:
            >>> cache = ArgumentDefinitionCache()
            >>> definitions = cache.get_or_build(MyViewHelper, builder)
            >>> list(definitions)
            ['name', 'items']

    """

    __slots__ = ("_definitions", "_lock")

    def __init__(self) -> None:
        self._definitions: dict[type, Definitions] = {}
        self._lock = threading.Lock()

    def get(self, view_helper_class: type) -> Definitions | None:
        """Return published definitions for a class, or None if not built yet."""
        return self._definitions.get(view_helper_class)

    def get_or_build(
        self,
        view_helper_class: type,
        build: Callable[[], Mapping[str, ArgumentDefinition]],
    ) -> Definitions:
        """Return definitions for ``view_helper_class``, building them on first use.

        Args:
            view_helper_class: Cache key
            build: Produces the ordered name → definition mapping

        Returns:
            Read-only mapping in declaration order
        """
        definitions = self._definitions.get(view_helper_class)
        if definitions is not None:
            return definitions

        built: Definitions = MappingProxyType(dict(build()))
        with self._lock:
            published = self._definitions.copy()
            published[view_helper_class] = built
            self._definitions = published
        logger.debug(
            "Cached %d argument definition(s) for %s",
            len(built),
            view_helper_class.__qualname__,
        )
        return built

    def clear(self) -> None:
        """Forget all cached definitions."""
        with self._lock:
            self._definitions = {}

    def __contains__(self, view_helper_class: object) -> bool:
        return view_helper_class in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


DEFAULT_ARGUMENT_CACHE = ArgumentDefinitionCache()
