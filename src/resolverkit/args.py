"""
Argument contracts derived from model schemas.

The ``ArgumentSchema`` of a model is the single source of truth for which
filter and sort keys a resolver accepts; the helpers below turn it into the
declared argument mappings resolvers expose.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import ValidationError
from .registry import TypeRegistry
from .schema import ModelSchema
from .types import SortDirection, field_annotation, make_type

if TYPE_CHECKING:
    from .composer import TypeComposer

ASCENDING = 1
DESCENDING = -1


@dataclass(frozen=True)
class ArgSpec:
    """Declared argument of a resolver."""

    name: str
    annotation: Any
    required: bool = False
    default: Any = None
    description: str | None = None


class ArgumentSchema:
    """Recognized filter/sort keys of a model and validation of argument values."""

    def __init__(self, model_schema: ModelSchema):
        self.model_schema = model_schema

    @property
    def filter_keys(self) -> list[str]:
        return self.model_schema.field_names

    @property
    def sort_keys(self) -> list[str]:
        return [spec.name for spec in self.model_schema if not spec.is_list and not spec.is_nested]

    def validate_filter(self, value: Any) -> dict[str, Any]:
        """
        Validate ``args.filter`` and return the constraints to apply.

        Keys whose value is None are dropped: absence means no constraint.

        Raises:
            ValidationError: Unknown key or a value of the wrong shape
        """
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValidationError(f"filter must be a mapping, got {type(value).__name__}")

        unknown = [key for key in value if not self.model_schema.has_field(key)]
        if unknown:
            names = ", ".join(map(str, unknown))
            raise ValidationError(f"Unknown filter field(s) for {self.model_schema.name}: {names}")

        constraints: dict[str, Any] = {}
        for key, item in value.items():
            if item is None:
                continue
            spec = self.model_schema.field(key)
            if not spec.accepts(item):
                raise ValidationError(
                    f"Invalid filter value for {self.model_schema.name}.{key}: {item!r}"
                )
            constraints[key] = list(item) if spec.is_list else item
        return constraints

    def validate_sort(self, value: Any) -> list[tuple[str, int]]:
        """
        Validate ``args.sort`` into an ordered list of (field, direction).

        The first entry is the primary sort key.

        Raises:
            ValidationError: Unknown or unsortable key, or a direction other than 1/-1
        """
        if value is None:
            return []
        if not isinstance(value, Mapping):
            raise ValidationError(f"sort must be a mapping, got {type(value).__name__}")

        sortable = set(self.sort_keys)
        order: list[tuple[str, int]] = []
        for key, direction in value.items():
            if direction is None:
                continue
            if key not in sortable:
                raise ValidationError(f"Cannot sort {self.model_schema.name} by '{key}'")
            if isinstance(direction, Enum):
                direction = direction.value
            if isinstance(direction, bool) or direction not in (ASCENDING, DESCENDING):
                raise ValidationError(
                    f"Sort direction for '{key}' must be 1 or -1, got {direction!r}"
                )
            order.append((key, direction))
        return order

    @staticmethod
    def validate_skip(value: Any) -> int:
        if value is None:
            return 0
        return _non_negative_int("skip", value)

    @staticmethod
    def validate_limit(value: Any) -> int | None:
        if value is None:
            return None
        return _non_negative_int("limit", value)


def _non_negative_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer, got {value!r}")
    return value


# Input types


def build_filter_input(type_composer: TypeComposer, registry: TypeRegistry) -> Any:
    """Get or create ``FilterFindMany<Type>Input``: every model field, all optional."""
    model_schema = type_composer.model_schema
    name = f"FilterFindMany{type_composer.type_name}Input"

    def factory() -> Any:
        return make_type(
            name,
            {spec.name: field_annotation(spec, optional=True) for spec in model_schema},
            {spec.name: spec.description for spec in model_schema},
            is_input=True,
        )

    return registry.get_or_create(name, factory)


def build_sort_input(type_composer: TypeComposer, registry: TypeRegistry) -> Any:
    """Get or create ``SortFindMany<Type>Input`` mapping sortable fields to a direction."""
    name = f"SortFindMany{type_composer.type_name}Input"
    sort_keys = type_composer.argument_schema.sort_keys

    def factory() -> Any:
        return make_type(
            name,
            {key: SortDirection | None for key in sort_keys},
            description="Fields listed first take precedence",
            is_input=True,
        )

    return registry.get_or_create(name, factory)


# Declared arguments


def filter_arg(type_composer: TypeComposer, registry: TypeRegistry) -> ArgSpec:
    return ArgSpec(
        name="filter",
        annotation=build_filter_input(type_composer, registry) | None,
        description="Filter by fields",
    )


def sort_arg(type_composer: TypeComposer, registry: TypeRegistry) -> ArgSpec:
    return ArgSpec(
        name="sort",
        annotation=build_sort_input(type_composer, registry) | None,
        description="Sort by fields",
    )


def skip_arg() -> ArgSpec:
    return ArgSpec(name="skip", annotation=int | None, default=0)


def limit_arg() -> ArgSpec:
    return ArgSpec(name="limit", annotation=int | None)


def id_arg(type_composer: TypeComposer) -> ArgSpec:
    return ArgSpec(name="_id", annotation=type_composer.id_type, required=True)


def ids_arg(type_composer: TypeComposer) -> ArgSpec:
    return ArgSpec(name="_ids", annotation=list[type_composer.id_type], required=True)


def find_many_args(type_composer: TypeComposer, registry: TypeRegistry) -> dict[str, ArgSpec]:
    """Arguments of findMany: filter, skip, limit, sort."""
    return {
        "filter": filter_arg(type_composer, registry),
        "skip": skip_arg(),
        "limit": limit_arg(),
        "sort": sort_arg(type_composer, registry),
    }
