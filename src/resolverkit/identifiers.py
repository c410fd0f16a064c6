"""
Access to the identifier of stored documents.
"""

from typing import Any

from .errors import ValidationError


class RecordIdAccessor:
    """
    Reads and matches document identifiers.

    Identifiers are treated as opaque values: they only need to be
    comparable for equality and convertible to a string. ``python_type`` is
    used to turn transport values (a GraphQL ID arrives as a string) back
    into the type the identifier column stores.
    """

    def __init__(self, id_field: str, python_type: type | None = None):
        self.id_field = id_field
        self.python_type = python_type

    def extract_id(self, document: Any) -> Any:
        """Return the identifier value of ``document``."""
        return getattr(document, self.id_field)

    def coerce(self, value: Any) -> Any:
        """Convert ``value`` to the identifier column's type when it arrives as text."""
        if value is None or self.python_type is None:
            return value
        if isinstance(value, self.python_type) and not isinstance(value, bool):
            return value
        if isinstance(value, str | int) and not isinstance(value, bool):
            try:
                return self.python_type(value)
            except (AttributeError, TypeError, ValueError) as e:
                raise ValidationError(
                    f"Invalid identifier {value!r} for field '{self.id_field}'"
                ) from e
        raise ValidationError(f"Invalid identifier {value!r} for field '{self.id_field}'")

    def id_filter(self, value: Any) -> dict[str, Any]:
        """Build a filter fragment matching the single document with identifier ``value``."""
        return {self.id_field: self.coerce(value)}

    def id_equals(self, document: Any, value: Any) -> bool:
        """Check whether ``document`` is addressed by ``value``."""
        return self.extract_id(document) == self.coerce(value)

    def __call__(self, document: Any) -> Any:
        return self.extract_id(document)

    def __repr__(self) -> str:
        return f"RecordIdAccessor(id_field={self.id_field!r})"
