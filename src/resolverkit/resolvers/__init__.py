"""Resolver factories.

Each factory takes a store and the TypeComposer of its model and returns an
immutable Resolver. Factories validate their inputs eagerly and raise
ConfigurationError before any resolver is built.
"""

from .count import count
from .find_by_id import find_by_id
from .find_by_ids import find_by_ids
from .find_many import find_many
from .remove_by_id import RemovePayload, remove_by_id

RESOLVER_FACTORIES = {
    "findById": find_by_id,
    "findByIds": find_by_ids,
    "findMany": find_many,
    "count": count,
    "removeById": remove_by_id,
}

__all__ = [
    "RESOLVER_FACTORIES",
    "RemovePayload",
    "count",
    "find_by_id",
    "find_by_ids",
    "find_many",
    "remove_by_id",
]
