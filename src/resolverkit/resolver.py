"""
Resolver descriptor and per-call parameters.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .errors import ValidationError
from .logging import reset_resolver_context, set_resolver_context

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from .args import ArgSpec


class ResolverKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"


BeforeRecordMutate = Callable[[Any, "ResolveParams"], Awaitable[Any]]


@dataclass(frozen=True)
class ResolveParams:
    """
    Input of one ``Resolver.resolve`` call.

    Attributes:
        args: Declared argument name -> value
        projection: Field names to load; None or empty loads every field
        before_record_mutate: Optional hook run on the fetched document before
            a mutation; returns the document to continue with
        session: Session shared by composed store calls; a fresh one per store
            call when None
        context: Opaque transport context (e.g. the GraphQL info object)
    """

    args: Mapping[str, Any] = field(default_factory=dict)
    projection: frozenset[str] | None = None
    before_record_mutate: BeforeRecordMutate | None = None
    session: AsyncSession | None = None
    context: Any = None

    @classmethod
    def coerce(cls, params: ResolveParams | Mapping[str, Any] | None) -> ResolveParams:
        """Accept ResolveParams, a plain mapping of its fields, or None."""
        if params is None:
            return cls()
        if isinstance(params, cls):
            return params
        if not isinstance(params, Mapping):
            raise ValidationError(f"Unsupported resolve params: {type(params).__name__}")

        data = dict(params)
        unknown = set(data) - {"args", "projection", "before_record_mutate", "session", "context"}
        if unknown:
            raise ValidationError(f"Unknown resolve params: {', '.join(sorted(unknown))}")

        projection = data.get("projection")
        return cls(
            args=dict(data.get("args") or {}),
            projection=frozenset(projection) if projection is not None else None,
            before_record_mutate=data.get("before_record_mutate"),
            session=data.get("session"),
            context=data.get("context"),
        )

    @property
    def fetches_all_fields(self) -> bool:
        return not self.projection

    def with_projection(self, projection: Iterable[str] | None) -> ResolveParams:
        """Return a copy whose projection is ``projection`` (empty = all fields)."""
        return replace(self, projection=frozenset(projection or ()))

    def with_args(self, **args: Any) -> ResolveParams:
        """Return a copy with ``args`` merged over the current arguments."""
        return replace(self, args={**self.args, **args})

    def with_session(self, session: AsyncSession | None) -> ResolveParams:
        return replace(self, session=session)


ResolveFn = Callable[[ResolveParams], Awaitable[Any]]


@dataclass(frozen=True)
class Resolver:
    """
    Named, typed query or mutation.

    Immutable once built and stateless between calls; everything a call
    needs arrives in its ResolveParams.
    """

    name: str
    kind: ResolverKind
    args: Mapping[str, ArgSpec]
    output_type: Any
    resolve_fn: ResolveFn = field(repr=False)
    description: str | None = None
    type_name: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "args", MappingProxyType(dict(self.args)))

    @property
    def qualified_name(self) -> str:
        return f"{self.type_name}.{self.name}" if self.type_name else self.name

    def has_arg(self, name: str) -> bool:
        """Check whether ``name`` is part of the declared argument contract."""
        return name in self.args

    def get_arg(self, name: str) -> ArgSpec:
        try:
            return self.args[name]
        except KeyError:
            raise KeyError(f"{self.qualified_name} has no argument '{name}'") from None

    @property
    def arg_names(self) -> list[str]:
        return list(self.args.keys())

    async def resolve(self, params: ResolveParams | Mapping[str, Any] | None = None) -> Any:
        """Run the resolver with ``params``."""
        params = ResolveParams.coerce(params)
        tokens = set_resolver_context(self.qualified_name)
        try:
            return await self.resolve_fn(params)
        finally:
            reset_resolver_context(tokens)
