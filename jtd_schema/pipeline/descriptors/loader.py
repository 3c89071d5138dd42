"""
Loader for descriptor graphs stored as JSON.

Reflection adapters written in other languages can dump their descriptors
in this format and let this package do the rest:

    {
      "types": [
        {"id": "app.Node", "name": "Node", "module": "app",
         "shape": {"kind": "struct", "fields": [{"name": "next", "type": "Optional[app.Node]"}]}},
        {"id": "Optional[app.Node]", "shape": {"kind": "optional", "inner": "app.Node"}}
      ]
    }
"""

from __future__ import annotations

import json
from typing import Any

from .shapes import (
    ArrayShape,
    DescriptorRegistry,
    EnumTagging,
    Field,
    NewtypeShape,
    OptionalShape,
    PrimitiveShape,
    ShapeKind,
    StructShape,
    TaggedEnumShape,
    TupleShape,
    TupleStructShape,
    TypeDescriptor,
    UnitStructShape,
    Variant,
    VariantKind,
)


def _fields(data: list[dict[str, Any]]) -> tuple[Field, ...]:
    return tuple(Field(name=f["name"], type_id=f["type"]) for f in data)


def _variant(data: dict[str, Any]) -> Variant:
    return Variant(
        discriminant=data["discriminant"],
        fields=_fields(data.get("fields", [])),
        kind=VariantKind(data.get("kind", VariantKind.STRUCT.value)),
    )


def shape_from_dict(data: dict[str, Any]) -> ShapeKind:
    """Build a shape from its dictionary form."""
    kind = data.get("kind")

    if kind == "primitive":
        return PrimitiveShape(kind=data["primitive"])
    if kind == "array":
        return ArrayShape(element=data["element"])
    if kind == "optional":
        return OptionalShape(inner=data["inner"])
    if kind == "struct":
        return StructShape(fields=_fields(data.get("fields", [])))
    if kind == "newtype":
        return NewtypeShape(inner=data["inner"])
    if kind == "enum":
        return TaggedEnumShape(
            tag_field=data.get("tag", ""),
            variants=tuple(_variant(v) for v in data.get("variants", [])),
            tagging=EnumTagging(data.get("tagging", EnumTagging.INTERNAL.value)),
        )
    if kind == "unit_struct":
        return UnitStructShape()
    if kind == "tuple_struct":
        return TupleStructShape(elements=tuple(data.get("elements", [])))
    if kind == "tuple":
        return TupleShape(elements=tuple(data.get("elements", [])))

    raise ValueError(f"Unknown shape kind: {kind!r}")


def descriptor_from_dict(data: dict[str, Any]) -> TypeDescriptor:
    """Build a descriptor from its dictionary form."""
    return TypeDescriptor(
        id=data["id"],
        name=data.get("name", data["id"]),
        shape=shape_from_dict(data["shape"]),
        module=data.get("module", ""),
    )


def load_descriptors(data: dict[str, Any]) -> DescriptorRegistry:
    """Build a registry from a {"types": [...]} document."""
    registry = DescriptorRegistry()
    for entry in data.get("types", []):
        registry.register(descriptor_from_dict(entry))
    return registry


def load_descriptors_file(path: str) -> DescriptorRegistry:
    """Read a descriptor document from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return load_descriptors(json.load(f))
