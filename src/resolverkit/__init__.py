"""
resolverkit
Schema-driven GraphQL resolvers for SQLAlchemy models
"""

__version__ = "0.1.0"

from .composer import TypeComposer, compose_with_sqlalchemy
from .config import settings
from .errors import (
    ConfigurationError,
    HookError,
    NotFoundError,
    ResolverKitError,
    StoreError,
    ValidationError,
)
from .registry import TypeRegistry, type_registry
from .resolver import ResolveParams, Resolver, ResolverKind
from .store import SQLAlchemyStore

__all__ = [
    "ConfigurationError",
    "HookError",
    "NotFoundError",
    "ResolveParams",
    "Resolver",
    "ResolverKind",
    "ResolverKitError",
    "SQLAlchemyStore",
    "StoreError",
    "TypeComposer",
    "TypeRegistry",
    "ValidationError",
    "__version__",
    "compose_with_sqlalchemy",
    "settings",
    "type_registry",
]
