"""
Type descriptor definitions.

A TypeDescriptor describes the shape of one source type. Descriptors refer to
each other by TypeId, so a descriptor graph may contain cycles. They are
produced by a reflection adapter and are never modified afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

TypeId = str


class PrimitiveKind(str, Enum):
    """Well-known primitive kinds.

    Only some of them have a direct IDL type; see PRIMITIVE_TYPE_NAMES.
    Reflection adapters may also report kinds outside this enum as plain
    strings, those are rejected by the validator.
    """

    BOOL = "bool"
    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    INT = "int"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    TIMESTAMP = "timestamp"


# Primitive kind -> IDL type name
PRIMITIVE_TYPE_NAMES: dict[str, str] = {
    PrimitiveKind.BOOL.value: "boolean",
    PrimitiveKind.INT8.value: "int8",
    PrimitiveKind.UINT8.value: "uint8",
    PrimitiveKind.INT16.value: "int16",
    PrimitiveKind.UINT16.value: "uint16",
    PrimitiveKind.INT32.value: "int32",
    PrimitiveKind.UINT32.value: "uint32",
    PrimitiveKind.FLOAT32.value: "float32",
    PrimitiveKind.FLOAT64.value: "float64",
    PrimitiveKind.STRING.value: "string",
    PrimitiveKind.TIMESTAMP.value: "timestamp",
}


def primitive_type_name(kind: str) -> str | None:
    """Return the IDL type name for a primitive kind, or None if it has none."""
    return PRIMITIVE_TYPE_NAMES.get(str(kind.value if isinstance(kind, Enum) else kind))


class EnumTagging(str, Enum):
    """How an enum's variants are told apart in JSON."""

    INTERNAL = "internal"  # {"tag": "Variant", ...fields}
    EXTERNAL = "external"  # {"Variant": {...fields}}
    ADJACENT = "adjacent"  # {"tag": "Variant", "content": {...}}
    UNTAGGED = "untagged"  # {...fields}


class VariantKind(str, Enum):
    """Syntactic kind of an enum variant."""

    STRUCT = "struct"
    UNIT = "unit"
    TUPLE = "tuple"


@dataclass(frozen=True)
class Field:
    """A named field of a struct or struct-shaped variant."""

    name: str
    type_id: TypeId


@dataclass(frozen=True)
class Variant:
    """One variant of an enum."""

    discriminant: str
    fields: tuple[Field, ...] = ()
    kind: VariantKind = VariantKind.STRUCT


@dataclass(frozen=True)
class PrimitiveShape:
    kind: str


@dataclass(frozen=True)
class ArrayShape:
    element: TypeId


@dataclass(frozen=True)
class OptionalShape:
    inner: TypeId


@dataclass(frozen=True)
class StructShape:
    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class NewtypeShape:
    inner: TypeId


@dataclass(frozen=True)
class TaggedEnumShape:
    tag_field: str
    variants: tuple[Variant, ...] = ()
    tagging: EnumTagging = EnumTagging.INTERNAL


@dataclass(frozen=True)
class UnitStructShape:
    """A struct without any fields or braces. Never representable."""


@dataclass(frozen=True)
class TupleStructShape:
    """A struct with unnamed fields. Representable only with exactly one field."""

    elements: tuple[TypeId, ...] = ()


@dataclass(frozen=True)
class TupleShape:
    """A heterogeneous fixed-size array. Never representable."""

    elements: tuple[TypeId, ...] = ()


ShapeKind = Union[
    PrimitiveShape,
    ArrayShape,
    OptionalShape,
    StructShape,
    NewtypeShape,
    TaggedEnumShape,
    UnitStructShape,
    TupleStructShape,
    TupleShape,
]


def referenced_type_ids(shape: ShapeKind) -> Iterator[TypeId]:
    """Yield the TypeIds a shape points at, in declaration order."""
    if isinstance(shape, ArrayShape):
        yield shape.element
    elif isinstance(shape, (OptionalShape, NewtypeShape)):
        yield shape.inner
    elif isinstance(shape, StructShape):
        for f in shape.fields:
            yield f.type_id
    elif isinstance(shape, TaggedEnumShape):
        for variant in shape.variants:
            for f in variant.fields:
                yield f.type_id
    elif isinstance(shape, (TupleStructShape, TupleShape)):
        yield from shape.elements


def is_hoistable(shape: ShapeKind) -> bool:
    """Whether types of this shape become named definitions."""
    return isinstance(shape, (StructShape, TaggedEnumShape))


def newtype_inner(shape: ShapeKind) -> TypeId | None:
    """Return the wrapped TypeId if the shape is a newtype, else None."""
    if isinstance(shape, NewtypeShape):
        return shape.inner
    if isinstance(shape, TupleStructShape) and len(shape.elements) == 1:
        return shape.elements[0]
    return None


@dataclass(frozen=True)
class TypeDescriptor:
    """Shape of one source type.

    Attributes:
        id: Globally unique id of the source type
        name: Human-readable name, used to derive definition names
        shape: The type's structure
        module: Dotted path of the declaring module, may be empty
    """

    id: TypeId
    name: str
    shape: ShapeKind
    module: str = ""

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}" if self.module else self.name


DescriptorLookup = Union[Callable[[TypeId], TypeDescriptor], Mapping[TypeId, TypeDescriptor]]


def as_lookup(source: DescriptorLookup) -> Callable[[TypeId], TypeDescriptor]:
    """Normalize a mapping or a callable into a lookup function."""
    if isinstance(source, Mapping):
        return source.__getitem__
    if callable(source):
        return source
    raise TypeError(f"Expected a mapping or a callable, got {type(source).__name__}")


@dataclass
class DescriptorRegistry(Mapping):
    """Dict-backed descriptor lookup.

    Reflection adapters fill it once; the pipeline only reads from it.
    """

    descriptors: dict[TypeId, TypeDescriptor] = field(default_factory=dict)

    def register(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        existing = self.descriptors.get(descriptor.id)
        if existing is not None and existing != descriptor:
            raise ValueError(f"Conflicting descriptors registered for {descriptor.id!r}")
        self.descriptors[descriptor.id] = descriptor
        return descriptor

    def lookup(self, type_id: TypeId) -> TypeDescriptor:
        return self.descriptors[type_id]

    def __getitem__(self, type_id: TypeId) -> TypeDescriptor:
        return self.descriptors[type_id]

    def __iter__(self) -> Iterator[TypeId]:
        return iter(self.descriptors)

    def __len__(self) -> int:
        return len(self.descriptors)

    def __call__(self, type_id: TypeId) -> TypeDescriptor:
        return self.descriptors[type_id]
