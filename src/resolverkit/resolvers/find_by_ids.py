from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..args import ids_arg, limit_arg, sort_arg
from ..errors import ValidationError
from ..registry import TypeRegistry
from ..resolver import ResolveParams, Resolver, ResolverKind
from ..store import SQLAlchemyStore
from .helpers import check_factory_args

if TYPE_CHECKING:
    from ..composer import TypeComposer


def find_by_ids(
    store: SQLAlchemyStore,
    type_composer: TypeComposer,
    registry: TypeRegistry | None = None,
) -> Resolver:
    """Build the findByIds query: documents whose identifier is in ``_ids``."""
    check_factory_args("findByIds", store, type_composer)
    registry = registry or type_composer.registry
    argument_schema = type_composer.argument_schema
    id_accessor = type_composer.id_accessor

    async def resolve(params: ResolveParams) -> list[Any]:
        ids = params.args.get("_ids")
        if ids is None:
            raise ValidationError(
                f"{type_composer.type_name}.findByIds resolver requires args._ids value"
            )
        if not isinstance(ids, list | tuple | set | frozenset):
            raise ValidationError("_ids must be a list of identifiers")
        if not ids:
            return []

        return await store.find_by_ids(
            id_accessor.id_field,
            [id_accessor.coerce(value) for value in ids],
            projection=params.projection,
            sort=argument_schema.validate_sort(params.args.get("sort")),
            limit=argument_schema.validate_limit(params.args.get("limit")),
            session=params.session,
        )

    return Resolver(
        name="findByIds",
        kind=ResolverKind.QUERY,
        args={
            "_ids": ids_arg(type_composer),
            "limit": limit_arg(),
            "sort": sort_arg(type_composer, registry),
        },
        output_type=list[type_composer.get_type()],
        resolve_fn=resolve,
        description=f"Find {type_composer.type_name} documents by their identifiers",
        type_name=type_composer.type_name,
    )
