from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..args import find_many_args
from ..logging import get_logger
from ..registry import TypeRegistry
from ..resolver import ResolveParams, Resolver, ResolverKind
from ..store import SQLAlchemyStore
from .helpers import check_factory_args

if TYPE_CHECKING:
    from ..composer import TypeComposer

logger = get_logger(__name__)


def find_many(
    store: SQLAlchemyStore,
    type_composer: TypeComposer,
    registry: TypeRegistry | None = None,
) -> Resolver:
    """
    Build the findMany query: filter, sort, skip, then limit.

    Resolves to a list of ORM instances (empty when nothing matches). Argument
    errors raise ValidationError before the store is queried.
    """
    check_factory_args("findMany", store, type_composer)
    registry = registry or type_composer.registry
    argument_schema = type_composer.argument_schema

    async def resolve(params: ResolveParams) -> list[Any]:
        args = params.args
        filter = argument_schema.validate_filter(args.get("filter"))
        sort = argument_schema.validate_sort(args.get("sort"))
        skip = argument_schema.validate_skip(args.get("skip"))
        limit = argument_schema.validate_limit(args.get("limit"))

        logger.debug("Resolving findMany", filter_keys=sorted(filter), skip=skip, limit=limit)
        return await store.find(
            filter,
            projection=params.projection,
            sort=sort,
            skip=skip,
            limit=limit,
            session=params.session,
        )

    return Resolver(
        name="findMany",
        kind=ResolverKind.QUERY,
        args=find_many_args(type_composer, registry),
        output_type=list[type_composer.get_type()],
        resolve_fn=resolve,
        description=f"Find many {type_composer.type_name} documents",
        type_name=type_composer.type_name,
    )
