"""
Type registry for generated GraphQL type definitions.
"""

import threading
from collections.abc import Callable
from typing import Any, TypeVar

from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class TypeRegistry:
    """
    Cache of generated output and input types, keyed by GraphQL type name.

    Resolver factories build their types through ``get_or_create`` so that
    building resolvers twice for the same model reuses one definition per
    name instead of producing conflicting duplicates. Build one registry per
    schema (or per test) and hand it to every factory that contributes to it.
    """

    def __init__(self):
        self._types: dict[str, Any] = {}
        # Reentrant: a factory may register the nested types it depends on.
        self._lock = threading.RLock()

    def get_or_create(self, name: str, factory: Callable[[], T]) -> T:
        """
        Return the definition registered under ``name``, creating it on first use.

        Args:
            name: GraphQL type name
            factory: Zero-argument callable building the definition. Not called
                when ``name`` is already registered.

        Returns:
            The registered definition

        Raises:
            Whatever ``factory`` raises; ``name`` stays unregistered in that case
        """
        if name in self._types:
            return self._types[name]

        with self._lock:
            if name in self._types:
                return self._types[name]

            definition = factory()
            self._types[name] = definition
            logger.debug("Registered type", name=name)
            return definition

    def get(self, name: str) -> Any | None:
        """Get a registered definition by name, or None."""
        return self._types.get(name)

    def names(self) -> list[str]:
        """List registered type names in registration order."""
        return list(self._types.keys())

    def clear(self) -> None:
        """Forget every registered definition."""
        with self._lock:
            self._types.clear()

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, name: str) -> bool:
        return name in self._types


# Default registry used when a factory is not given one explicitly
type_registry = TypeRegistry()
