"""
Assemble generated resolvers into a Strawberry schema
"""

from typing import Any

import strawberry
from graphql import get_introspection_query, graphql_sync
from graphql import validate_schema as gql_validate_schema

from ..composer import TypeComposer
from ..logging import get_logger
from ..resolver import ResolverKind
from .fields import as_field, field_name_for

logger = get_logger(__name__)


def build_schema(*type_composers: TypeComposer, **schema_kwargs: Any) -> strawberry.Schema:
    """
    Build a schema exposing every resolver of ``type_composers``.

    Queries land on ``Query`` and mutations on ``Mutation``, named
    ``<type><Resolver>`` (``userFindMany``, ``userRemoveById``).
    """
    query_fields: dict[str, Any] = {}
    mutation_fields: dict[str, Any] = {}

    for type_composer in type_composers:
        for resolver in type_composer.resolvers:
            name = field_name_for(type_composer, resolver)
            target = mutation_fields if resolver.kind is ResolverKind.MUTATION else query_fields
            if name in target:
                raise ValueError(f"Duplicate root field '{name}'")
            target[name] = as_field(resolver, type_composer)

    if not query_fields:
        raise ValueError("A schema needs at least one query resolver")

    query = strawberry.type(type("Query", (), {"__module__": __name__, **query_fields}))
    mutation = None
    if mutation_fields:
        mutation = strawberry.type(
            type("Mutation", (), {"__module__": __name__, **mutation_fields})
        )

    schema = strawberry.Schema(query=query, mutation=mutation, **schema_kwargs)
    logger.info(
        "GraphQL schema built",
        queries=sorted(query_fields),
        mutations=sorted(mutation_fields),
    )
    return schema


def validate_schema(schema: strawberry.Schema) -> None:
    """Validate a built schema.

    Checks that all type references resolve and that introspection runs,
    so configuration mistakes fail at startup instead of per request.

    Raises:
        Exception: If the schema is invalid or has unresolved types
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise
