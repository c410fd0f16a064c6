from __future__ import annotations

from typing import TYPE_CHECKING

from ..args import filter_arg
from ..registry import TypeRegistry
from ..resolver import ResolveParams, Resolver, ResolverKind
from ..store import SQLAlchemyStore
from .helpers import check_factory_args

if TYPE_CHECKING:
    from ..composer import TypeComposer


def count(
    store: SQLAlchemyStore,
    type_composer: TypeComposer,
    registry: TypeRegistry | None = None,
) -> Resolver:
    """Build the count query over the same filter as findMany."""
    check_factory_args("count", store, type_composer)
    registry = registry or type_composer.registry
    argument_schema = type_composer.argument_schema

    async def resolve(params: ResolveParams) -> int:
        filter = argument_schema.validate_filter(params.args.get("filter"))
        return await store.count(filter, session=params.session)

    return Resolver(
        name="count",
        kind=ResolverKind.QUERY,
        args={"filter": filter_arg(type_composer, registry)},
        output_type=int,
        resolve_fn=resolve,
        description=f"Count {type_composer.type_name} documents",
        type_name=type_composer.type_name,
    )
