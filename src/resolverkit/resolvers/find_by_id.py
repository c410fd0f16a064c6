from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..args import id_arg
from ..logging import get_logger
from ..registry import TypeRegistry
from ..resolver import ResolveParams, Resolver, ResolverKind
from ..store import SQLAlchemyStore
from .helpers import check_factory_args, require_arg

if TYPE_CHECKING:
    from ..composer import TypeComposer

logger = get_logger(__name__)


def find_by_id(
    store: SQLAlchemyStore,
    type_composer: TypeComposer,
    registry: TypeRegistry | None = None,
) -> Resolver:
    """
    Build the findById query.

    Resolves to the document or None. An empty projection loads every field,
    which mutations rely on to give hooks the complete document.
    """
    check_factory_args("findById", store, type_composer)
    id_accessor = type_composer.id_accessor

    async def resolve(params: ResolveParams) -> Any | None:
        record_id = require_arg(params, "_id", type_composer, "findById")
        id_filter = id_accessor.id_filter(record_id)

        document = await store.find_by_id(
            id_filter, projection=params.projection, session=params.session
        )
        logger.debug("Resolved findById", found=document is not None)
        return document

    return Resolver(
        name="findById",
        kind=ResolverKind.QUERY,
        args={"_id": id_arg(type_composer)},
        output_type=type_composer.get_type() | None,
        resolve_fn=resolve,
        description=f"Find one {type_composer.type_name} by its identifier",
        type_name=type_composer.type_name,
    )
