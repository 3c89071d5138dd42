"""
Shape validator for type descriptor graphs.

Runs before any mapping and rejects descriptors that have no representation
in the IDL. The validator never modifies its input and never produces a
partial result: it returns the list of violations it found.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from ..descriptors.shapes import (
    ArrayShape,
    DescriptorLookup,
    EnumTagging,
    NewtypeShape,
    OptionalShape,
    PrimitiveShape,
    ShapeKind,
    StructShape,
    TaggedEnumShape,
    TupleShape,
    TupleStructShape,
    TypeDescriptor,
    TypeId,
    UnitStructShape,
    VariantKind,
    as_lookup,
    is_hoistable,
    newtype_inner,
    primitive_type_name,
    referenced_type_ids,
)
from ..errors import ValidationError, Violation, ViolationKind


class _StopValidation(Exception):
    """Internal signal used by fail-fast mode."""


class Validator:
    """Checks every descriptor reachable from a set of roots."""

    def __init__(self, lookup: DescriptorLookup):
        """
        Initialize the validator.

        Args:
            lookup: Mapping or callable resolving a TypeId to its descriptor
        """
        self.lookup = as_lookup(lookup)

    def validate(self, root_ids: Iterable[TypeId], fail_fast: bool = False) -> list[Violation]:
        """
        Validate the descriptor graph reachable from the given roots.

        Args:
            root_ids: TypeIds to start from
            fail_fast: Stop after the first violation

        Returns:
            Violations in discovery order, empty if the graph is valid
        """
        violations: list[Violation] = []

        def report(violation: Violation) -> None:
            violations.append(violation)
            if fail_fast:
                raise _StopValidation

        try:
            reachable = self._collect_reachable(root_ids)
            for descriptor in reachable:
                self._check_descriptor(descriptor, report)
            self._check_inline_cycles(reachable, report)
        except _StopValidation:
            pass

        return violations

    def check(self, root_ids: Iterable[TypeId], fail_fast: bool = False) -> None:
        """Validate and raise ValidationError if anything is wrong."""
        violations = self.validate(root_ids, fail_fast=fail_fast)
        if violations:
            raise ValidationError(violations)

    def _collect_reachable(self, root_ids: Iterable[TypeId]) -> list[TypeDescriptor]:
        """Breadth-first walk of the graph, each type once, in declaration order."""
        seen: set[TypeId] = set()
        order: list[TypeDescriptor] = []
        queue = deque(root_ids)

        while queue:
            type_id = queue.popleft()
            if type_id in seen:
                continue
            seen.add(type_id)
            descriptor = self.lookup(type_id)
            order.append(descriptor)
            for child_id in referenced_type_ids(descriptor.shape):
                if child_id not in seen:
                    queue.append(child_id)

        return order

    def _check_descriptor(self, descriptor: TypeDescriptor, report) -> None:
        """Run the per-type checks in their fixed order."""
        shape = descriptor.shape
        type_id = descriptor.id

        # Struct has at least one field, or is a newtype
        if isinstance(shape, UnitStructShape):
            report(Violation(ViolationKind.UNIT_STRUCT, type_id, message="unit structs have no JSON object form"))
        elif isinstance(shape, TupleStructShape) and newtype_inner(shape) is None:
            if shape.elements:
                report(
                    Violation(
                        ViolationKind.TUPLE_STRUCT,
                        type_id,
                        message=f"tuple struct with {len(shape.elements)} unnamed fields",
                    )
                )
            else:
                report(Violation(ViolationKind.UNIT_STRUCT, type_id, message="tuple struct without fields"))
        elif isinstance(shape, StructShape):
            if not shape.fields:
                report(Violation(ViolationKind.EMPTY_STRUCT, type_id, message="struct has no fields"))
            self._check_unique_fields(type_id, shape.fields, report)

        if isinstance(shape, TaggedEnumShape):
            self._check_enum(descriptor, shape, report)

        if isinstance(shape, TupleShape):
            report(
                Violation(
                    ViolationKind.HETEROGENEOUS_TUPLE,
                    type_id,
                    message=f"tuple of {len(shape.elements)} elements",
                )
            )

        if isinstance(shape, PrimitiveShape) and primitive_type_name(shape.kind) is None:
            kind = getattr(shape.kind, "value", shape.kind)
            report(
                Violation(
                    ViolationKind.UNSUPPORTED_PRIMITIVE,
                    type_id,
                    message=f"primitive {kind!r} has no IDL type",
                )
            )

    def _check_unique_fields(self, type_id: TypeId, fields, report, variant: str | None = None) -> None:
        seen = set()
        for f in fields:
            if f.name in seen:
                location = f.name if variant is None else f"{variant}.{f.name}"
                report(Violation(ViolationKind.DUPLICATE_FIELD, type_id, location, "field declared twice"))
            seen.add(f.name)

    def _check_enum(self, descriptor: TypeDescriptor, shape: TaggedEnumShape, report) -> None:
        """Check variant uniformity, discriminants and tagging of an enum."""
        type_id = descriptor.id

        for variant in shape.variants:
            if variant.kind != VariantKind.STRUCT:
                report(
                    Violation(
                        ViolationKind.MIXED_ENUM_VARIANTS,
                        type_id,
                        variant.discriminant,
                        f"{variant.kind.value} variant in an enum that must only have struct variants",
                    )
                )

        seen = set()
        for variant in shape.variants:
            if variant.discriminant in seen:
                report(
                    Violation(
                        ViolationKind.DUPLICATE_DISCRIMINANT,
                        type_id,
                        variant.discriminant,
                        "discriminant used by more than one variant",
                    )
                )
            seen.add(variant.discriminant)
            if variant.kind == VariantKind.STRUCT:
                fields = [f for f in variant.fields if f.name != shape.tag_field]
                self._check_unique_fields(type_id, fields, report, variant.discriminant)

        if shape.tagging != EnumTagging.INTERNAL:
            report(
                Violation(
                    ViolationKind.NON_INTERNAL_TAGGING,
                    type_id,
                    message=f"{EnumTagging(shape.tagging).value} tagging, only internal tagging is supported",
                )
            )
        elif not shape.tag_field:
            report(Violation(ViolationKind.NON_INTERNAL_TAGGING, type_id, message="internal tagging without a tag field"))

    def _check_inline_cycles(self, reachable: list[TypeDescriptor], report) -> None:
        """Reject cycles that never pass through a struct or enum.

        Arrays, optionals and newtypes are always inlined, so a cycle made only
        of them would expand forever.
        """
        shapes: dict[TypeId, ShapeKind] = {d.id: d.shape for d in reachable}
        done: set[TypeId] = set()
        reported: set[TypeId] = set()

        for descriptor in reachable:
            if descriptor.id in done or is_hoistable(descriptor.shape):
                continue

            # Iterative depth-first search over inline edges only
            on_path: list[TypeId] = []
            on_path_set: set[TypeId] = set()
            stack: list[tuple[TypeId, bool]] = [(descriptor.id, False)]
            while stack:
                type_id, leaving = stack.pop()
                if leaving:
                    on_path.pop()
                    on_path_set.discard(type_id)
                    done.add(type_id)
                    continue
                if type_id in done:
                    continue
                if type_id in on_path_set:
                    if type_id not in reported:
                        reported.add(type_id)
                        cycle = on_path[on_path.index(type_id) :] + [type_id]
                        report(
                            Violation(
                                ViolationKind.INLINE_CYCLE,
                                type_id,
                                message="recursion without a struct or enum: " + " -> ".join(cycle),
                            )
                        )
                    continue

                on_path.append(type_id)
                on_path_set.add(type_id)
                stack.append((type_id, True))
                for child_id in reversed(list(self._inline_edges(shapes[type_id]))):
                    if not is_hoistable(shapes[child_id]):
                        stack.append((child_id, False))

    def _inline_edges(self, shape: ShapeKind):
        if isinstance(shape, ArrayShape):
            yield shape.element
        elif isinstance(shape, (OptionalShape, NewtypeShape)):
            yield shape.inner
        else:
            inner = newtype_inner(shape)
            if inner is not None:
                yield inner


def validate(root_ids: Iterable[TypeId], lookup: DescriptorLookup, fail_fast: bool = False) -> list[Violation]:
    """Validate the graph reachable from root_ids; see Validator.validate."""
    return Validator(lookup).validate(root_ids, fail_fast=fail_fast)
