"""
Field-level description of a data model, derived from SQLAlchemy mappings.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ARRAY, JSON, inspect
from sqlalchemy.orm import Mapper

from .errors import ConfigurationError


@dataclass(frozen=True)
class FieldSpec:
    """One field of a model schema."""

    name: str
    python_type: type
    required: bool = False
    is_list: bool = False
    is_nested: bool = False
    description: str | None = None

    def accepts(self, value: Any) -> bool:
        """Check whether ``value`` has an acceptable shape for this field."""
        if self.is_list:
            return isinstance(value, list | tuple) and all(
                _is_instance(item, self.python_type) for item in value
            )
        if self.is_nested:
            return isinstance(value, dict | list)
        return _is_instance(value, self.python_type)


def _is_instance(value: Any, python_type: type) -> bool:
    # bool is an int subclass but never a valid int/float filter value
    if isinstance(value, bool) and python_type is not bool:
        return False
    if python_type is float:
        return isinstance(value, int | float)
    return isinstance(value, python_type)


class ModelSchema:
    """Ordered, name-unique collection of fields plus the identifier field."""

    def __init__(self, name: str, fields: Iterable[FieldSpec], id_field: str):
        self.name = name
        self._fields: dict[str, FieldSpec] = {}
        for field_spec in fields:
            if field_spec.name in self._fields:
                raise ConfigurationError(
                    f"Schema '{name}' declares field '{field_spec.name}' more than once"
                )
            self._fields[field_spec.name] = field_spec

        if id_field not in self._fields:
            raise ConfigurationError(f"Schema '{name}' has no identifier field '{id_field}'")
        self.id_field = id_field

    @property
    def fields(self) -> list[FieldSpec]:
        return list(self._fields.values())

    @property
    def field_names(self) -> list[str]:
        return list(self._fields.keys())

    def field(self, name: str) -> FieldSpec | None:
        return self._fields.get(name)

    def has_field(self, name: str) -> bool:
        return name in self._fields

    def __iter__(self):
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"ModelSchema(name={self.name!r}, fields={self.field_names!r})"


def get_mapper(model: Any) -> Mapper:
    """Return the SQLAlchemy mapper of ``model`` or raise ConfigurationError."""
    mapper = inspect(model, raiseerr=False) if isinstance(model, type) else None
    if not isinstance(mapper, Mapper):
        raise ConfigurationError(f"{model!r} is not an SQLAlchemy mapped class")
    return mapper


def _field_from_column(name: str, column: Any) -> FieldSpec:
    column_type = column.type
    description = column.comment or column.doc
    required = not column.nullable

    if isinstance(column_type, ARRAY):
        return FieldSpec(
            name=name,
            python_type=column_type.item_type.python_type,
            required=required,
            is_list=True,
            description=description,
        )

    if isinstance(column_type, JSON):
        # A JSON column can be declared as a list of scalars via column.info["item_type"]
        item_type = column.info.get("item_type")
        if item_type is not None:
            return FieldSpec(
                name=name,
                python_type=item_type,
                required=required,
                is_list=True,
                description=description,
            )
        return FieldSpec(
            name=name,
            python_type=dict,
            required=required,
            is_nested=True,
            description=description,
        )

    try:
        python_type = column_type.python_type
    except NotImplementedError as e:
        raise ConfigurationError(
            f"Column '{name}' has type {column_type!r} without a python equivalent"
        ) from e

    return FieldSpec(
        name=name,
        python_type=python_type,
        required=required,
        description=description,
    )


def schema_from_model(
    model: Any, name: str | None = None, id_field: str | None = None
) -> ModelSchema:
    """
    Derive a ModelSchema from an SQLAlchemy mapped class.

    Args:
        model: Declarative mapped class
        name: Schema (and GraphQL type) name, defaults to the class name
        id_field: Attribute used as document identifier, defaults to the
            single primary key column

    Raises:
        ConfigurationError: If ``model`` is not mapped, has no usable
            identifier, or declares an unsupported column type
    """
    mapper = get_mapper(model)

    fields = []
    for prop in mapper.column_attrs:
        column = prop.columns[0]
        fields.append(_field_from_column(prop.key, column))

    if id_field is None:
        primary_key = mapper.primary_key
        if len(primary_key) != 1:
            raise ConfigurationError(
                f"{mapper.class_.__name__} has a composite primary key; pass id_field explicitly"
            )
        id_field = mapper.get_property_by_column(primary_key[0]).key

    return ModelSchema(name or mapper.class_.__name__, fields, id_field)
