"""
TypeComposer: the GraphQL type of one model plus the resolvers built for it.
"""

from collections.abc import Callable, Iterable
from typing import Any

from .args import ArgumentSchema
from .errors import ConfigurationError
from .identifiers import RecordIdAccessor
from .logging import get_logger
from .registry import TypeRegistry, type_registry
from .resolver import Resolver
from .schema import ModelSchema, schema_from_model
from .store import SQLAlchemyStore
from .types import build_output_type

logger = get_logger(__name__)

DEFAULT_RESOLVERS = ("findById", "findByIds", "findMany", "count", "removeById")


class TypeComposer:
    """
    Output type, argument schema and identifier access for one model.

    Also keeps the resolvers built for the model, addressable by name.
    """

    def __init__(
        self,
        store: SQLAlchemyStore,
        model_schema: ModelSchema,
        registry: TypeRegistry | None = None,
    ):
        if not isinstance(store, SQLAlchemyStore):
            raise ConfigurationError("TypeComposer requires an SQLAlchemyStore")
        if not isinstance(model_schema, ModelSchema):
            raise ConfigurationError("TypeComposer requires a ModelSchema")

        self.store = store
        self.model_schema = model_schema
        self.registry = registry if registry is not None else type_registry
        self.argument_schema = ArgumentSchema(model_schema)

        id_spec = model_schema.field(model_schema.id_field)
        self.id_type: type = id_spec.python_type
        self.id_accessor = RecordIdAccessor(model_schema.id_field, id_spec.python_type)

        self._output_type = build_output_type(model_schema, self.registry)
        self._resolvers: dict[str, Resolver] = {}

    @property
    def type_name(self) -> str:
        return self.model_schema.name

    def get_type(self) -> Any:
        """Return the registered GraphQL object type of the model."""
        return self._output_type

    def get_record_id_fn(self) -> Callable[[Any], Any]:
        return self.id_accessor.extract_id

    # Resolvers

    def add_resolver(self, resolver: Resolver) -> None:
        if not isinstance(resolver, Resolver):
            raise ConfigurationError(f"Expected a Resolver, got {type(resolver).__name__}")
        self._resolvers[resolver.name] = resolver

    def get_resolver(self, name: str) -> Resolver:
        try:
            return self._resolvers[name]
        except KeyError:
            raise KeyError(f"{self.type_name} has no resolver '{name}'") from None

    def has_resolver(self, name: str) -> bool:
        return name in self._resolvers

    def resolver_names(self) -> list[str]:
        return list(self._resolvers.keys())

    @property
    def resolvers(self) -> list[Resolver]:
        return list(self._resolvers.values())

    def __repr__(self) -> str:
        return f"TypeComposer(type_name={self.type_name!r}, resolvers={self.resolver_names()!r})"


def compose_with_sqlalchemy(
    store: SQLAlchemyStore,
    registry: TypeRegistry | None = None,
    name: str | None = None,
    id_field: str | None = None,
    resolvers: Iterable[str] = DEFAULT_RESOLVERS,
) -> TypeComposer:
    """
    Build the TypeComposer of ``store.model`` and attach its standard resolvers.

    Args:
        store: Store wrapping the mapped model
        registry: Type registry shared by everything going into one schema
        name: GraphQL type name, defaults to the model class name
        id_field: Identifier attribute, defaults to the primary key
        resolvers: Names of the resolvers to build (see RESOLVER_FACTORIES)

    Raises:
        ConfigurationError: Invalid store or model, or an unknown resolver name
    """
    from .resolvers import RESOLVER_FACTORIES

    if not isinstance(store, SQLAlchemyStore):
        raise ConfigurationError(
            "First arg for compose_with_sqlalchemy() should be an instance of SQLAlchemyStore."
        )

    model_schema = schema_from_model(store.model, name=name, id_field=id_field)
    type_composer = TypeComposer(store, model_schema, registry)

    for resolver_name in resolvers:
        factory = RESOLVER_FACTORIES.get(resolver_name)
        if factory is None:
            raise ConfigurationError(f"Unknown resolver '{resolver_name}'")
        type_composer.add_resolver(factory(store, type_composer, type_composer.registry))

    logger.debug(
        "Composed type",
        type=type_composer.type_name,
        resolvers=type_composer.resolver_names(),
    )
    return type_composer
