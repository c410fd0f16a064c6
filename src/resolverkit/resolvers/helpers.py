"""
Checks shared by the resolver factories
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..errors import ConfigurationError, ValidationError
from ..store import SQLAlchemyStore

if TYPE_CHECKING:
    from ..composer import TypeComposer
    from ..resolver import ResolveParams


def check_factory_args(resolver_name: str, store: Any, type_composer: Any) -> None:
    """Raise ConfigurationError unless the factory got a store and a TypeComposer."""
    from ..composer import TypeComposer

    if not isinstance(store, SQLAlchemyStore):
        raise ConfigurationError(
            f"First arg for Resolver {resolver_name}() should be an instance of SQLAlchemyStore."
        )

    if not isinstance(type_composer, TypeComposer):
        raise ConfigurationError(
            f"Second arg for Resolver {resolver_name}() should be an instance of TypeComposer."
        )

    if type_composer.store is not store:
        raise ConfigurationError(
            f"Resolver {resolver_name}() got a TypeComposer built for a different store."
        )


def require_arg(
    params: ResolveParams, name: str, type_composer: TypeComposer, resolver_name: str
) -> Any:
    """Return ``params.args[name]`` or raise ValidationError when it is missing."""
    value = params.args.get(name)
    if value is None or value == "":
        raise ValidationError(
            f"{type_composer.type_name}.{resolver_name} resolver requires args.{name} value"
        )
    return value
