import dataclasses
import enum
import json
from dataclasses import dataclass
from typing import Annotated, Literal, NamedTuple, NewType, Optional

import pytest

from jtd_schema.pipeline import GeneratorConfig, ValidationError, ViolationKind, map_types, serialize
from jtd_schema.pipeline.descriptors import (
    ArrayShape,
    OptionalShape,
    PrimitiveShape,
    StructShape,
    TupleShape,
)
from jtd_schema.pipeline.errors import ReflectionError
from jtd_schema.reflection import DataclassReflector, Float32, Float64, Int32, TaggedUnion, UInt8, describe

UserId = NewType("UserId", str)


@dataclass
class Point:
    x: Float64
    y: Float64


@dataclass
class User:
    id: UserId
    name: str
    email: str | None
    tags: list[str]
    home: Optional[Point] = None


@dataclass
class Circle:
    kind: Literal["circle"]
    radius: float


@dataclass
class Square:
    kind: Literal["square"]
    side: float


Shape = Annotated[Circle | Square, TaggedUnion("Shape", tag="kind")]


@dataclass
class KeyUp:
    event_kind: Literal["up"]
    code: UInt8


@dataclass
class KeyDown:
    source: Literal["down"] = dataclasses.field(metadata={"jtd_name": "eventKind"})
    code: UInt8 = 0


KeyEvent = Annotated[KeyUp | KeyDown, TaggedUnion("KeyEvent", tag="eventKind")]


@dataclass
class Drawing:
    shapes: list[Shape]


@dataclass
class TreeNode:
    value: Int32
    children: list["TreeNode"]


@dataclass
class Ping:
    pass


@dataclass
class Pong:
    count: UInt8


class Color(enum.Enum):
    RED = 1
    GREEN = 2


@dataclass
class Counter:
    count: int


@dataclass
class Person:
    first_name: str
    last_name: str = dataclasses.field(default="", metadata={"jtd_name": "surname"})


class Pair(NamedTuple):
    left: str
    right: str


class Meters(NamedTuple):
    value: Float32


def generate(*annotations, rename_all=None, **config):
    type_ids, registry = describe(*annotations, rename_all=rename_all)
    return json.loads(serialize(map_types(type_ids, registry, GeneratorConfig(**config))))


class TestDescribe:
    def test_dataclass_type_id_is_qualified(self):
        type_ids, registry = describe(Point)
        assert type_ids == [f"{__name__}.Point"]
        descriptor = registry[type_ids[0]]
        assert descriptor.name == "Point"
        assert descriptor.module == __name__
        assert isinstance(descriptor.shape, StructShape)
        assert [f.name for f in descriptor.shape.fields] == ["x", "y"]

    def test_builtin_primitives(self):
        reflector = DataclassReflector()
        assert reflector.describe(str) == "string"
        assert reflector.describe(bool) == "bool"
        assert reflector.describe(float) == "float64"
        assert reflector.describe(int) == "int"
        assert reflector.registry["int"].shape == PrimitiveShape(kind="int")

    def test_sized_integer_markers(self):
        reflector = DataclassReflector()
        assert reflector.describe(Int32) == "int32"
        assert reflector.describe(UInt8) == "uint8"

    def test_containers(self):
        reflector = DataclassReflector()
        assert reflector.describe(list[str]) == "list[string]"
        assert reflector.describe(set[str]) == "list[string]"
        assert reflector.describe(tuple[str, ...]) == "list[string]"
        assert reflector.registry["list[string]"].shape == ArrayShape(element="string")
        assert reflector.describe(Optional[Int32]) == "Optional[int32]"
        assert reflector.registry["Optional[int32]"].shape == OptionalShape(inner="int32")

    def test_string_literal_is_a_string(self):
        assert DataclassReflector().describe(Literal["on", "off"]) == "string"

    def test_heterogeneous_tuple(self):
        reflector = DataclassReflector()
        type_id = reflector.describe(tuple[str, int])
        assert reflector.registry[type_id].shape == TupleShape(elements=("string", "int"))

    def test_unknown_annotation(self):
        with pytest.raises(ReflectionError):
            DataclassReflector().describe(dict[str, int])

    def test_unknown_rename_rule(self):
        with pytest.raises(ValueError):
            DataclassReflector(rename_all="Title Case")


class TestGenerate:
    def test_dataclass_with_optional_fields(self):
        assert generate(User) == {
            "definitions": {
                "Point": {"properties": {"x": {"type": "float64"}, "y": {"type": "float64"}}},
            },
            "properties": {
                "id": {"type": "string"},
                "name": {"type": "string"},
                "tags": {"elements": {"type": "string"}},
            },
            "optionalProperties": {
                "email": {"type": "string", "nullable": True},
                "home": {"ref": "Point", "nullable": True},
            },
        }

    def test_tagged_union(self):
        assert generate(Drawing) == {
            "definitions": {
                "Shape": {
                    "discriminator": "kind",
                    "mapping": {
                        "circle": {"properties": {"radius": {"type": "float64"}}},
                        "square": {"properties": {"side": {"type": "float64"}}},
                    },
                }
            },
            "properties": {"shapes": {"elements": {"ref": "Shape"}}},
        }

    def test_tagged_union_as_root(self):
        schema = generate(Shape)
        assert schema["discriminator"] == "kind"
        assert list(schema["mapping"]) == ["circle", "square"]

    def test_tagged_union_with_renamed_tag_field(self):
        assert generate(KeyEvent, rename_all="camelCase") == {
            "discriminator": "eventKind",
            "mapping": {
                "up": {"properties": {"code": {"type": "uint8"}}},
                "down": {"properties": {"code": {"type": "uint8"}}},
            },
        }

    def test_recursive_dataclass(self):
        assert generate(TreeNode) == {
            "definitions": {
                "TreeNode": {
                    "properties": {
                        "value": {"type": "int32"},
                        "children": {"elements": {"ref": "TreeNode"}},
                    }
                }
            },
            "ref": "TreeNode",
        }

    def test_named_tuple_with_one_field_is_a_newtype(self):
        assert generate(Meters) == {"type": "float32"}

    def test_rename_all_and_field_metadata(self):
        assert generate(Person, rename_all="camelCase") == {
            "properties": {"firstName": {"type": "string"}, "surname": {"type": "string"}},
        }

    def test_long_naming_uses_module(self):
        schema = generate(Drawing, User, naming="long")
        assert f"{__name__}.Drawing" in schema["definitions"]
        assert f"{__name__}.Point" in schema["definitions"]
        # The tagged union was declared without a module
        assert "Shape" in schema["definitions"]


class TestRejected:
    def test_plain_int_is_unsupported(self):
        with pytest.raises(ValidationError) as exc_info:
            generate(Counter)
        assert exc_info.value.kind == ViolationKind.UNSUPPORTED_PRIMITIVE
        assert exc_info.value.type_id == "int"

    def test_enum_class(self):
        with pytest.raises(ValidationError) as exc_info:
            generate(Color)
        kinds = [v.kind for v in exc_info.value.violations]
        assert kinds == [
            ViolationKind.MIXED_ENUM_VARIANTS,
            ViolationKind.MIXED_ENUM_VARIANTS,
            ViolationKind.NON_INTERNAL_TAGGING,
        ]

    def test_union_with_unit_variant(self):
        Message = Annotated[Ping | Pong, TaggedUnion("Message")]
        with pytest.raises(ValidationError) as exc_info:
            generate(Message)
        assert exc_info.value.kind == ViolationKind.MIXED_ENUM_VARIANTS
        assert exc_info.value.field == "Ping"

    def test_bare_union_is_untagged(self):
        with pytest.raises(ValidationError) as exc_info:
            generate(Circle | Square)
        assert exc_info.value.kind == ViolationKind.NON_INTERNAL_TAGGING

    def test_tuple_struct(self):
        with pytest.raises(ValidationError) as exc_info:
            generate(Pair)
        assert exc_info.value.kind == ViolationKind.TUPLE_STRUCT
        assert exc_info.value.type_id == f"{__name__}.Pair"
