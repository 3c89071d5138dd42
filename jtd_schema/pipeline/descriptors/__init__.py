"""
Type descriptors module.

Contains the input shapes consumed by the validator and the mapper, and a
dict-backed descriptor lookup.
"""

from __future__ import annotations

from .loader import descriptor_from_dict, load_descriptors, load_descriptors_file, shape_from_dict
from .shapes import (
    ArrayShape,
    DescriptorLookup,
    DescriptorRegistry,
    EnumTagging,
    Field,
    NewtypeShape,
    OptionalShape,
    PrimitiveKind,
    PrimitiveShape,
    ShapeKind,
    StructShape,
    TaggedEnumShape,
    TupleShape,
    TupleStructShape,
    TypeDescriptor,
    TypeId,
    UnitStructShape,
    Variant,
    VariantKind,
    as_lookup,
    primitive_type_name,
)

__all__ = [
    "TypeId",
    "TypeDescriptor",
    "DescriptorLookup",
    "DescriptorRegistry",
    "ShapeKind",
    "PrimitiveKind",
    "PrimitiveShape",
    "ArrayShape",
    "OptionalShape",
    "StructShape",
    "NewtypeShape",
    "TaggedEnumShape",
    "UnitStructShape",
    "TupleStructShape",
    "TupleShape",
    "Field",
    "Variant",
    "VariantKind",
    "EnumTagging",
    "as_lookup",
    "primitive_type_name",
    "descriptor_from_dict",
    "shape_from_dict",
    "load_descriptors",
    "load_descriptors_file",
]
