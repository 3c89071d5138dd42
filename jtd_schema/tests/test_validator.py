"""
Unit tests for the descriptor shape validator.
"""

import unittest

from jtd_schema.pipeline import ValidationError, Validator, ViolationKind, validate
from jtd_schema.pipeline.descriptors import (
    ArrayShape,
    EnumTagging,
    Field,
    StructShape,
    TaggedEnumShape,
    Variant,
    VariantKind,
)

from .builders import GraphBuilder


class TestValidatorAccepts(unittest.TestCase):
    """Representable graphs produce no violations"""

    def setUp(self):
        self.graph = GraphBuilder()

    def test_primitives_and_containers(self):
        g = self.graph
        root = g.struct(
            "Record",
            flag=g.primitive("bool"),
            tags=g.array(g.primitive("string")),
            score=g.optional(g.primitive("float32")),
            at=g.primitive("timestamp"),
        )
        self.assertEqual(validate([root], g.registry), [])

    def test_single_field_tuple_struct_is_a_newtype(self):
        g = self.graph
        wrapper = g.tuple_struct("UserId", g.primitive("uint32"))
        self.assertEqual(validate([wrapper], g.registry), [])

    def test_recursion_through_struct(self):
        g = self.graph
        node = g.struct("Node", children=g.array("Node"), parent=g.optional("Node"))
        self.assertEqual(validate([node], g.registry), [])

    def test_internally_tagged_struct_enum(self):
        g = self.graph
        shape = g.enum("Shape", tag="kind", Circle={"kind": g.primitive("string"), "r": g.primitive("float64")})
        self.assertEqual(validate([shape], g.registry), [])


class TestValidatorRejects(unittest.TestCase):
    """Each violation kind is reported for the offending type"""

    def setUp(self):
        self.graph = GraphBuilder()

    def assertSingleViolation(self, root, kind, type_id, field=None):
        violations = validate([root], self.graph.registry)
        self.assertEqual(len(violations), 1, violations)
        self.assertEqual(violations[0].kind, kind)
        self.assertEqual(violations[0].type_id, type_id)
        self.assertEqual(violations[0].field, field)
        return violations[0]

    def test_unit_struct(self):
        unit = self.graph.unit_struct("Marker")
        self.assertSingleViolation(unit, ViolationKind.UNIT_STRUCT, "Marker")

    def test_tuple_struct_without_fields(self):
        empty = self.graph.tuple_struct("Nothing")
        self.assertSingleViolation(empty, ViolationKind.UNIT_STRUCT, "Nothing")

    def test_tuple_struct(self):
        g = self.graph
        pair = g.tuple_struct("Pair", g.primitive("int32"), g.primitive("int32"))
        violation = self.assertSingleViolation(pair, ViolationKind.TUPLE_STRUCT, "Pair")
        self.assertIn("2 unnamed fields", violation.message)

    def test_empty_struct(self):
        empty = self.graph.struct("Empty")
        self.assertSingleViolation(empty, ViolationKind.EMPTY_STRUCT, "Empty")

    def test_duplicate_field(self):
        s = self.graph.primitive("string")
        shape = StructShape(fields=(Field("name", s), Field("name", s)))
        twice = self.graph.add("Twice", shape)
        self.assertSingleViolation(twice, ViolationKind.DUPLICATE_FIELD, "Twice", "name")

    def test_mixed_enum_variants(self):
        g = self.graph
        status = g.enum("Status", Ok={"code": g.primitive("uint16")}, Pending=VariantKind.UNIT)
        self.assertSingleViolation(status, ViolationKind.MIXED_ENUM_VARIANTS, "Status", "Pending")

    def test_all_unit_enum_is_rejected(self):
        g = self.graph
        color = g.enum("Color", Red=VariantKind.UNIT, Green=VariantKind.UNIT)
        violations = validate([color], g.registry)
        self.assertEqual([v.kind for v in violations], [ViolationKind.MIXED_ENUM_VARIANTS] * 2)
        self.assertEqual([v.field for v in violations], ["Red", "Green"])

    def test_duplicate_discriminant(self):
        s = self.graph.primitive("string")
        shape = TaggedEnumShape(
            tag_field="type",
            variants=(Variant("A", (Field("x", s),)), Variant("A", (Field("y", s),))),
        )
        doubled = self.graph.add("Doubled", shape)
        self.assertSingleViolation(doubled, ViolationKind.DUPLICATE_DISCRIMINANT, "Doubled", "A")

    def test_external_tagging(self):
        g = self.graph
        message = g.enum("Message", tagging=EnumTagging.EXTERNAL, Text={"body": g.primitive("string")})
        violation = self.assertSingleViolation(message, ViolationKind.NON_INTERNAL_TAGGING, "Message")
        self.assertIn("external", violation.message)

    def test_internal_tagging_without_tag_field(self):
        g = self.graph
        message = g.enum("Message", tag="", Text={"body": g.primitive("string")})
        self.assertSingleViolation(message, ViolationKind.NON_INTERNAL_TAGGING, "Message")

    def test_heterogeneous_tuple(self):
        g = self.graph
        pair = g.tuple(g.primitive("string"), g.primitive("float64"))
        self.assertSingleViolation(pair, ViolationKind.HETEROGENEOUS_TUPLE, pair)

    def test_unsupported_primitive(self):
        for kind in ("int64", "uint64", "int", "char"):
            with self.subTest(kind=kind):
                graph = GraphBuilder()
                self.graph = graph
                self.assertSingleViolation(graph.primitive(kind), ViolationKind.UNSUPPORTED_PRIMITIVE, kind)

    def test_violation_deep_in_the_graph(self):
        g = self.graph
        inner = g.struct("Inner", big=g.primitive("uint64"))
        outer = g.struct("Outer", items=g.array(g.optional(inner)))
        self.assertSingleViolation(outer, ViolationKind.UNSUPPORTED_PRIMITIVE, "uint64")

    def test_inline_cycle(self):
        g = self.graph
        # Forever = list[Forever], through a newtype
        g.add("list[Forever]", ArrayShape(element="Forever"))
        g.newtype("Forever", "list[Forever]")
        violations = validate(["Forever"], g.registry)
        self.assertEqual([v.kind for v in violations], [ViolationKind.INLINE_CYCLE])
        self.assertIn("Forever -> list[Forever] -> Forever", violations[0].message)


class TestValidatorModes(unittest.TestCase):
    """Batch and fail-fast reporting"""

    def setUp(self):
        g = GraphBuilder()
        self.root = g.struct(
            "Bad",
            unit=g.unit_struct("Unit"),
            pair=g.tuple(g.primitive("string"), g.primitive("bool")),
            big=g.primitive("int64"),
        )
        self.registry = g.registry

    def test_batch_mode_reports_everything_in_discovery_order(self):
        violations = Validator(self.registry).validate([self.root])
        self.assertEqual(
            [v.kind for v in violations],
            [
                ViolationKind.UNIT_STRUCT,
                ViolationKind.HETEROGENEOUS_TUPLE,
                ViolationKind.UNSUPPORTED_PRIMITIVE,
            ],
        )

    def test_fail_fast_stops_at_first(self):
        violations = Validator(self.registry).validate([self.root], fail_fast=True)
        self.assertEqual([v.kind for v in violations], [ViolationKind.UNIT_STRUCT])

    def test_check_raises_with_all_violations(self):
        with self.assertRaises(ValidationError) as ctx:
            Validator(self.registry).check([self.root])
        self.assertEqual(ctx.exception.kind, ViolationKind.UNIT_STRUCT)
        self.assertEqual(ctx.exception.type_id, "Unit")
        self.assertEqual(len(ctx.exception.violations), 3)
        self.assertIn("(and 2 more)", str(ctx.exception))

    def test_validator_does_not_modify_registry(self):
        before = dict(self.registry)
        Validator(self.registry).validate([self.root])
        self.assertEqual(dict(self.registry), before)


if __name__ == "__main__":
    unittest.main()
