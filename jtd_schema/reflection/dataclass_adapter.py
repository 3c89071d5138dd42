"""
Reflection adapter for Python dataclasses and typing annotations.

Describes Python types as TypeDescriptors so they can go through the
pipeline. The adapter reports what it sees faithfully, including shapes the
validator rejects (plain int, heterogeneous tuples, untagged unions, Enum
classes); rejecting them is the validator's job.

Annotation mapping:
    bool, float, str, datetime       -> primitives (bool, float64, string, timestamp)
    int                              -> unbounded "int" (annotate with Int32 and friends)
    Annotated[T, PrimitiveKind.X]    -> primitive X
    Literal["a", "b"]                -> string
    list[T], set[T], tuple[T, ...]   -> array
    T | None, Optional[T]            -> optional
    typing.NewType                   -> newtype
    NamedTuple                       -> tuple struct (newtype when it has one field)
    dataclass                        -> struct
    Annotated[A | B, TaggedUnion()]  -> tagged enum, one variant per dataclass
    enum.Enum subclass               -> enum of unit variants
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import logging
import types
import typing
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from ..pipeline.descriptors.shapes import (
    ArrayShape,
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
    Variant,
    VariantKind,
)
from ..pipeline.errors import ReflectionError
from ..utils import apply_rename_rule

logger = logging.getLogger(__name__)

Int8 = Annotated[int, PrimitiveKind.INT8]
UInt8 = Annotated[int, PrimitiveKind.UINT8]
Int16 = Annotated[int, PrimitiveKind.INT16]
UInt16 = Annotated[int, PrimitiveKind.UINT16]
Int32 = Annotated[int, PrimitiveKind.INT32]
UInt32 = Annotated[int, PrimitiveKind.UINT32]
Int64 = Annotated[int, PrimitiveKind.INT64]
UInt64 = Annotated[int, PrimitiveKind.UINT64]
Float32 = Annotated[float, PrimitiveKind.FLOAT32]
Float64 = Annotated[float, PrimitiveKind.FLOAT64]

# Builtin type -> primitive kind
BUILTIN_PRIMITIVES: dict[type, PrimitiveKind] = {
    bool: PrimitiveKind.BOOL,
    int: PrimitiveKind.INT,
    float: PrimitiveKind.FLOAT64,
    str: PrimitiveKind.STRING,
    datetime.datetime: PrimitiveKind.TIMESTAMP,
}

SEQUENCE_ORIGINS = (list, set, frozenset, Sequence, typing.List, typing.Set, typing.FrozenSet)

# Field metadata key overriding the serialized field name
RENAME_METADATA_KEY = "jtd_name"


@dataclass(frozen=True)
class TaggedUnion:
    """Marks a union of dataclasses as an enum.

    Attributes:
        name: Name of the enum type
        tag: Field carrying the discriminant (internal tagging)
        tagging: How variants are told apart
        module: Module the enum belongs to, for long definition names
    """

    name: str
    tag: str = "type"
    tagging: EnumTagging = EnumTagging.INTERNAL
    module: str = ""


def _type_id_of(cls: Any) -> TypeId:
    return f"{cls.__module__}.{cls.__qualname__}"


def _is_named_tuple(cls: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, "_fields")


class DataclassReflector:
    """Builds TypeDescriptors for Python annotations."""

    def __init__(self, rename_all: str | None = None, registry: DescriptorRegistry | None = None):
        """
        Initialize the reflector.

        Args:
            rename_all: Rename rule applied to every dataclass field name
                (see utils.RENAME_RULES), e.g. "camelCase"
            registry: Registry to fill; a new one is created if omitted
        """
        if rename_all is not None:
            apply_rename_rule("probe", rename_all)
        self.rename_all = rename_all
        self.registry = registry if registry is not None else DescriptorRegistry()
        self._in_progress: set[TypeId] = set()

    def describe(self, annotation: Any) -> TypeId:
        """
        Describe an annotation and everything it refers to.

        Returns:
            The TypeId of the annotation, registered in self.registry

        Raises:
            ReflectionError: If the annotation cannot be described at all
        """
        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)

        if origin is Annotated:
            return self._describe_annotated(annotation, args)

        if origin in (Union, types.UnionType):
            return self._describe_union(annotation, args)

        if origin is Literal and all(isinstance(a, str) for a in args):
            # String literals are plain strings on the wire
            return self.describe(str)

        if origin in SEQUENCE_ORIGINS:
            element_id = self.describe(args[0] if args else Any)
            return self._register(f"list[{element_id}]", "list", ArrayShape(element=element_id))

        if origin is tuple:
            return self._describe_tuple(args)

        if isinstance(annotation, typing.NewType):
            return self._describe_newtype(annotation)

        if annotation in BUILTIN_PRIMITIVES:
            kind = BUILTIN_PRIMITIVES[annotation]
            return self._register(kind.value, kind.value, PrimitiveShape(kind=kind.value))

        if dataclasses.is_dataclass(annotation) and isinstance(annotation, type):
            return self._describe_dataclass(annotation)

        if _is_named_tuple(annotation):
            return self._describe_named_tuple(annotation)

        if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
            return self._describe_enum_class(annotation)

        raise ReflectionError(f"Cannot describe annotation {annotation!r}")

    def _register(self, type_id: TypeId, name: str, shape: ShapeKind, module: str = "") -> TypeId:
        if type_id not in self.registry:
            self.registry.register(TypeDescriptor(id=type_id, name=name, shape=shape, module=module))
        return type_id

    def _describe_annotated(self, annotation: Any, args: tuple) -> TypeId:
        base, *extras = args
        for extra in extras:
            if isinstance(extra, PrimitiveKind):
                return self._register(extra.value, extra.value, PrimitiveShape(kind=extra.value))
            if isinstance(extra, TaggedUnion):
                return self._describe_tagged_union(extra, typing.get_args(base))
        return self.describe(base)

    def _describe_union(self, annotation: Any, args: tuple) -> TypeId:
        members = [a for a in args if a is not type(None)]
        if len(members) < len(args):
            inner = members[0] if len(members) == 1 else Union[tuple(members)]
            inner_id = self.describe(inner)
            return self._register(f"Optional[{inner_id}]", "Optional", OptionalShape(inner=inner_id))

        # A bare union has no tag field: describe it as untagged
        marker = TaggedUnion(name=" | ".join(getattr(m, "__name__", repr(m)) for m in members), tag="", tagging=EnumTagging.UNTAGGED)
        return self._describe_tagged_union(marker, members)

    def _describe_tuple(self, args: tuple) -> TypeId:
        if len(args) == 2 and args[1] is Ellipsis:
            element_id = self.describe(args[0])
            return self._register(f"list[{element_id}]", "list", ArrayShape(element=element_id))
        element_ids = tuple(self.describe(a) for a in args)
        return self._register(f"tuple[{', '.join(element_ids)}]", "tuple", TupleShape(elements=element_ids))

    def _describe_newtype(self, annotation: Any) -> TypeId:
        type_id = f"{annotation.__module__}.{annotation.__name__}"
        if type_id in self.registry or type_id in self._in_progress:
            return type_id
        self._in_progress.add(type_id)
        try:
            inner_id = self.describe(annotation.__supertype__)
        finally:
            self._in_progress.discard(type_id)
        return self._register(type_id, annotation.__name__, NewtypeShape(inner=inner_id), annotation.__module__)

    def _describe_dataclass(self, cls: type) -> TypeId:
        type_id = _type_id_of(cls)
        if type_id in self.registry or type_id in self._in_progress:
            return type_id

        self._in_progress.add(type_id)
        try:
            fields = self._describe_fields(cls)
        finally:
            self._in_progress.discard(type_id)

        logger.debug("Described dataclass %s with %d fields", type_id, len(fields))
        return self._register(type_id, cls.__name__, StructShape(fields=fields), cls.__module__)

    def _describe_fields(self, cls: type, skip: str | None = None) -> tuple[Field, ...]:
        hints = typing.get_type_hints(cls, include_extras=True)
        fields = []
        for dc_field in dataclasses.fields(cls):
            name = self._wire_name(dc_field)
            if skip is not None and name == skip:
                continue
            fields.append(Field(name=name, type_id=self.describe(hints[dc_field.name])))
        return tuple(fields)

    def _describe_named_tuple(self, cls: type) -> TypeId:
        type_id = _type_id_of(cls)
        if type_id in self.registry or type_id in self._in_progress:
            return type_id

        self._in_progress.add(type_id)
        try:
            hints = typing.get_type_hints(cls, include_extras=True)
            elements = tuple(self.describe(hints.get(name, Any)) for name in cls._fields)
        finally:
            self._in_progress.discard(type_id)

        return self._register(type_id, cls.__name__, TupleStructShape(elements=elements), cls.__module__)

    def _describe_enum_class(self, cls: type) -> TypeId:
        # Enum members serialize as bare strings: unit variants, no tag field
        variants = tuple(Variant(discriminant=member.name, kind=VariantKind.UNIT) for member in cls)
        shape = TaggedEnumShape(tag_field="", variants=variants, tagging=EnumTagging.EXTERNAL)
        return self._register(_type_id_of(cls), cls.__name__, shape, cls.__module__)

    def _describe_tagged_union(self, marker: TaggedUnion, members: Sequence[Any]) -> TypeId:
        type_id = f"{marker.module}.{marker.name}" if marker.module else marker.name
        if type_id in self.registry or type_id in self._in_progress:
            return type_id

        self._in_progress.add(type_id)
        try:
            variants = tuple(self._describe_variant(member, marker.tag) for member in members)
        finally:
            self._in_progress.discard(type_id)

        shape = TaggedEnumShape(tag_field=marker.tag, variants=variants, tagging=marker.tagging)
        return self._register(type_id, marker.name, shape, marker.module)

    def _describe_variant(self, member: Any, tag: str) -> Variant:
        if not (dataclasses.is_dataclass(member) and isinstance(member, type)):
            # Anything but a dataclass serializes as a single unnamed value
            self.describe(member)
            return Variant(discriminant=getattr(member, "__name__", repr(member)), kind=VariantKind.TUPLE)

        discriminant = self._declared_discriminant(member, tag) or member.__name__
        fields = self._describe_fields(member, skip=tag or None)
        if not dataclasses.fields(member):
            return Variant(discriminant=discriminant, kind=VariantKind.UNIT)
        return Variant(discriminant=discriminant, fields=fields)

    def _wire_name(self, dc_field: dataclasses.Field) -> str:
        """The serialized name of a dataclass field."""
        return dc_field.metadata.get(RENAME_METADATA_KEY) or apply_rename_rule(dc_field.name, self.rename_all)

    def _declared_discriminant(self, cls: type, tag: str) -> str | None:
        """Read the discriminant from the tag field's `Literal["value"]` hint, if declared.

        The tag is matched against serialized field names, so it follows
        rename_all and per-field renames.
        """
        if not tag:
            return None
        hints = typing.get_type_hints(cls, include_extras=True)
        for dc_field in dataclasses.fields(cls):
            if self._wire_name(dc_field) != tag:
                continue
            hint = hints.get(dc_field.name)
            if typing.get_origin(hint) is Literal:
                return str(typing.get_args(hint)[0])
            return None
        return None


def describe(*annotations: Any, rename_all: str | None = None) -> tuple[list[TypeId], DescriptorRegistry]:
    """Describe annotations; returns their TypeIds and the filled registry."""
    reflector = DataclassReflector(rename_all=rename_all)
    type_ids = [reflector.describe(annotation) for annotation in annotations]
    return type_ids, reflector.registry
