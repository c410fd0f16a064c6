from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..args import id_arg
from ..errors import NotFoundError
from ..logging import get_logger
from ..registry import TypeRegistry
from ..resolver import ResolveParams, Resolver, ResolverKind
from ..store import SQLAlchemyStore
from ..types import make_type
from .find_by_id import find_by_id
from .helpers import check_factory_args, require_arg

if TYPE_CHECKING:
    from ..composer import TypeComposer

logger = get_logger(__name__)


@dataclass(frozen=True)
class RemovePayload:
    """Result of a removeById mutation."""

    record_id: Any
    record: Any | None = None


def remove_by_id_payload_type(type_composer: TypeComposer, registry: TypeRegistry) -> Any:
    """Get or create ``RemoveById<Type>Payload``."""
    name = f"RemoveById{type_composer.type_name}Payload"

    def factory() -> Any:
        return make_type(
            name,
            {
                "record_id": type_composer.id_type,
                "record": type_composer.get_type() | None,
            },
            {
                "record_id": "Removed document ID",
                "record": "Removed document",
            },
        )

    return registry.get_or_create(name, factory)


def remove_by_id(
    store: SQLAlchemyStore,
    type_composer: TypeComposer,
    registry: TypeRegistry | None = None,
) -> Resolver:
    """
    Build the removeById mutation.

    1) Retrieve the complete document through findById.
    2) Pass it through ``before_record_mutate`` when one is given.
    3) Delete the instance so the mapper's delete events fire.
    4) Return the removed document and its identifier.

    Fetch, hook and delete share one session; a failing hook rolls it back
    before anything is deleted.
    """
    check_factory_args("removeById", store, type_composer)
    registry = registry or type_composer.registry

    find_by_id_resolver = find_by_id(store, type_composer, registry)
    id_accessor = type_composer.id_accessor
    output_type = remove_by_id_payload_type(type_composer, registry)

    async def resolve(params: ResolveParams) -> RemovePayload:
        record_id = require_arg(params, "_id", type_composer, "removeById")

        async with store.session_scope(params.session) as session:
            # Hooks and delete events may need fields the caller did not select
            fetch_params = params.with_projection(None).with_session(session)

            document = await find_by_id_resolver.resolve(fetch_params)
            if params.before_record_mutate is not None:
                document = await params.before_record_mutate(document, fetch_params)

            if not document:
                raise NotFoundError(f"{type_composer.type_name} {record_id!r} not found")

            removed = await store.remove(document, session=session)
            if not removed:
                raise NotFoundError(
                    f"{type_composer.type_name} {record_id!r} vanished before it could be removed"
                )

        removed_id = id_accessor.extract_id(removed)
        logger.info("Document removed", type=type_composer.type_name, record_id=str(removed_id))
        return RemovePayload(record=removed, record_id=removed_id)

    return Resolver(
        name="removeById",
        kind=ResolverKind.MUTATION,
        args={"_id": id_arg(type_composer)},
        output_type=output_type,
        resolve_fn=resolve,
        description=(
            f"Remove one {type_composer.type_name}: retrieve the document, "
            "remove it with delete events, and return it"
        ),
        type_name=type_composer.type_name,
    )
