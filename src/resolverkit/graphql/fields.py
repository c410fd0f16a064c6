"""
Expose Resolver objects as Strawberry fields.

The field functions are built at runtime: their signature is assembled from
the resolver's declared arguments, so annotations here must stay real
objects (no postponed evaluation in this module).
"""

import dataclasses
import inspect
from enum import Enum
from typing import Annotated, Any

import strawberry
from strawberry.types.nodes import SelectedField
from strawberry.utils.str_converters import to_camel_case

from ..composer import TypeComposer
from ..resolver import ResolveParams, Resolver, ResolverKind


def field_name_for(type_composer: TypeComposer, resolver: Resolver) -> str:
    """Root field name of a resolver, e.g. ``userFindMany``."""
    type_name = type_composer.type_name
    return f"{type_name[:1].lower()}{type_name[1:]}{resolver.name[:1].upper()}{resolver.name[1:]}"


def to_plain(value: Any) -> Any:
    """Turn Strawberry input objects into dicts, dropping unset fields."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        plain = {}
        for field in dataclasses.fields(value):
            item = getattr(value, field.name)
            if item is None or item is strawberry.UNSET:
                continue
            plain[field.name] = to_plain(item)
        return plain
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    return value


def projection_from_info(
    info: strawberry.Info, type_composer: TypeComposer
) -> frozenset[str] | None:
    """Field names selected under the current field, or None to load everything."""
    python_names = {}
    for name in type_composer.model_schema.field_names:
        python_names[name] = name
        python_names[to_camel_case(name)] = name

    projection = set()
    for selected in info.selected_fields:
        for selection in selected.selections:
            if not isinstance(selection, SelectedField):
                # Fragments: not worth resolving here, load the whole document
                return None
            if selection.name == "__typename":
                continue
            if selection.name in python_names:
                projection.add(python_names[selection.name])
    return frozenset(projection) or None


def as_field(resolver: Resolver, type_composer: TypeComposer) -> Any:
    """Wrap ``resolver`` as a Strawberry query field or mutation."""
    needs_projection = resolver.kind is ResolverKind.QUERY

    async def resolve(info: strawberry.Info, **kwargs: Any) -> Any:
        args = {name: to_plain(value) for name, value in kwargs.items() if value is not None}
        params = ResolveParams(
            args=args,
            projection=projection_from_info(info, type_composer) if needs_projection else None,
            context=info,
        )
        return await resolver.resolve(params)

    parameters = [
        inspect.Parameter(
            "info", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=strawberry.Info
        )
    ]
    for arg in resolver.args.values():
        annotation = Annotated[
            arg.annotation,
            strawberry.argument(name=arg.name, description=arg.description),
        ]
        if arg.required:
            default = inspect.Parameter.empty
        else:
            default = arg.default
        parameters.append(
            inspect.Parameter(
                arg.name, inspect.Parameter.KEYWORD_ONLY, annotation=annotation, default=default
            )
        )

    resolve.__signature__ = inspect.Signature(parameters, return_annotation=resolver.output_type)
    resolve.__annotations__ = {
        **{parameter.name: parameter.annotation for parameter in parameters},
        "return": resolver.output_type,
    }
    resolve.__name__ = field_name_for(type_composer, resolver)

    if resolver.kind is ResolverKind.MUTATION:
        return strawberry.mutation(
            resolver=resolve, name=resolve.__name__, description=resolver.description
        )
    return strawberry.field(
        resolver=resolve, name=resolve.__name__, description=resolver.description
    )
