"""
Runtime construction of Strawberry types from model schemas
"""

from enum import Enum
from typing import Any

import strawberry
from strawberry.scalars import JSON

from .registry import TypeRegistry
from .schema import FieldSpec, ModelSchema


@strawberry.enum
class SortDirection(Enum):
    """Sort direction for one field of a composite order."""

    ASC = 1
    DESC = -1


def field_annotation(field_spec: FieldSpec, optional: bool = False) -> Any:
    """Map a schema field to the annotation Strawberry should see."""
    annotation: Any = JSON if field_spec.is_nested else field_spec.python_type
    if field_spec.is_list:
        annotation = list[annotation]
    if optional or not field_spec.required:
        annotation = annotation | None
    return annotation


def make_type(
    name: str,
    annotations: dict[str, Any],
    descriptions: dict[str, str | None] | None = None,
    description: str | None = None,
    is_input: bool = False,
) -> Any:
    """Create a Strawberry object (or input) type named ``name`` at runtime.

    Every field gets a ``None`` default so field order never matters to the
    underlying dataclass.
    """
    descriptions = descriptions or {}
    namespace: dict[str, Any] = {"__annotations__": dict(annotations), "__module__": __name__}
    for field_name in annotations:
        namespace[field_name] = strawberry.field(
            default=None, description=descriptions.get(field_name)
        )

    cls = type(name, (), namespace)
    if is_input:
        return strawberry.input(cls, name=name, description=description)
    return strawberry.type(cls, name=name, description=description)


def build_output_type(model_schema: ModelSchema, registry: TypeRegistry) -> Any:
    """Get or create the GraphQL object type mirroring ``model_schema``."""

    def factory() -> Any:
        return make_type(
            model_schema.name,
            {spec.name: field_annotation(spec) for spec in model_schema},
            {spec.name: spec.description for spec in model_schema},
        )

    return registry.get_or_create(model_schema.name, factory)
