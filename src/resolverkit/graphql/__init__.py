"""Strawberry bindings for generated resolvers."""

from .fields import as_field, field_name_for
from .schema import build_schema, validate_schema

__all__ = ["as_field", "build_schema", "field_name_for", "validate_schema"]
