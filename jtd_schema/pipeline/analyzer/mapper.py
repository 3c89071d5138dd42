"""
Schema mapper that transforms a descriptor graph into a schema document.

The mapper walks the graph depth first, in field and variant declaration
order, so the output is deterministic. Struct and enum types are hoisted
into named definitions through a ReferenceRegistry; every other shape is
inlined at its use site.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..config import GeneratorConfig, RootInlining
from ..descriptors.shapes import (
    ArrayShape,
    DescriptorLookup,
    Field,
    OptionalShape,
    PrimitiveShape,
    StructShape,
    TaggedEnumShape,
    TypeDescriptor,
    TypeId,
    as_lookup,
    is_hoistable,
    newtype_inner,
    primitive_type_name,
)
from ..schema_ast.nodes import (
    DiscriminatorNode,
    ElementsNode,
    EmptyNode,
    PropertiesNode,
    RefNode,
    SchemaDocument,
    SchemaNode,
    TypeNode,
)
from .name_resolver import NameResolver
from .reference_registry import ReferenceRegistry
from .validator import Validator

logger = logging.getLogger(__name__)


class SchemaMapper:
    """Maps type descriptors to JSON Type Definition schemas.

    The mapper keeps no per-call state: each call to map() gets its own
    ReferenceRegistry.
    """

    def __init__(self, lookup: DescriptorLookup, config: GeneratorConfig | None = None):
        """
        Initialize the mapper.

        Args:
            lookup: Mapping or callable resolving a TypeId to its descriptor
            config: Generation configuration
        """
        self.lookup = as_lookup(lookup)
        self.config = config or GeneratorConfig()
        self.name_resolver = NameResolver(self.config.naming)
        self.validator = Validator(self.lookup)

    def map(self, root_ids: TypeId | Iterable[TypeId]) -> SchemaDocument:
        """
        Map the given root types to a schema document.

        Args:
            root_ids: One TypeId or several

        Returns:
            SchemaDocument with the root schema and all definitions

        Raises:
            ValidationError: If any reachable type has no IDL representation
            NameCollisionError: If two types get the same definition name
        """
        root_ids = [root_ids] if isinstance(root_ids, str) else list(root_ids)
        if not root_ids:
            raise ValueError("At least one root type is required")

        # Validation always completes before mapping starts
        self.validator.check(root_ids, fail_fast=self.config.fail_fast)

        registry = ReferenceRegistry()
        roots = [self._map_type(type_id, registry) for type_id in root_ids]

        if len(roots) == 1:
            root = self._resolve_root(root_ids[0], roots[0], registry)
        else:
            # Several roots: each named root lives in definitions
            root = EmptyNode()

        document = SchemaDocument(root=root, definitions=registry.definitions())
        logger.debug(
            "Mapped %s into %d definitions",
            ", ".join(root_ids),
            len(document.definitions),
        )
        return document

    def _resolve_root(self, type_id: TypeId, root: SchemaNode, registry: ReferenceRegistry) -> SchemaNode:
        """Apply the root inlining policy to the single root."""
        if self.config.root_inlining != RootInlining.INLINE_IF_SOLE_AND_UNREFERENCED:
            return root
        if not isinstance(root, RefNode):
            return root

        # Newtypes are transparent, so a wrapped root counts as its inner type
        inner = newtype_inner(self.lookup(type_id).shape)
        while inner is not None:
            type_id = inner
            inner = newtype_inner(self.lookup(type_id).shape)

        # The root's own ref is the only permitted site
        if registry.name_of(type_id) != root.ref or registry.reference_count(root.ref) != 1:
            return root

        logger.debug("Inlining root definition %r", root.ref)
        return registry.discard(root.ref)

    def _map_type(self, type_id: TypeId, registry: ReferenceRegistry) -> SchemaNode:
        """Map one type, recursing into the named types it refers to.

        Chains of arrays, optionals and newtypes are walked in a loop, so only
        struct and enum nesting adds to the call depth.
        """
        wrappers: list[type] = []
        while True:
            descriptor = self.lookup(type_id)
            shape = descriptor.shape
            if isinstance(shape, ArrayShape):
                wrappers.append(ArrayShape)
                type_id = shape.element
            elif isinstance(shape, OptionalShape):
                wrappers.append(OptionalShape)
                type_id = shape.inner
            elif newtype_inner(shape) is not None:
                type_id = newtype_inner(shape)
            else:
                break

        if isinstance(shape, PrimitiveShape):
            node: SchemaNode = TypeNode(type_name=primitive_type_name(shape.kind))
        elif is_hoistable(shape):
            node = self._map_named(descriptor, registry)
        else:
            raise TypeError(f"Unsupported shape for {type_id!r}: {type(shape).__name__}")

        # Rebuild from the innermost node outwards
        for wrapper in reversed(wrappers):
            if wrapper is ArrayShape:
                node = ElementsNode(elements=node)
            else:
                node = node.with_nullable(True)
        return node

    def _map_named(self, descriptor: TypeDescriptor, registry: ReferenceRegistry) -> RefNode:
        """Hoist a struct or enum into definitions and return a ref to it."""
        candidate = self.name_resolver.definition_name(descriptor)
        name, already_reserved = registry.reserve_or_get(descriptor.id, candidate)

        if not already_reserved:
            shape = descriptor.shape
            if isinstance(shape, StructShape):
                body = self._map_struct(descriptor.id, shape.fields, registry)
            elif isinstance(shape, TaggedEnumShape):
                body = self._map_enum(descriptor.id, shape, registry)
            else:
                raise TypeError(f"Cannot name shape {type(shape).__name__}")
            registry.finalize(name, body)

        registry.add_reference(name)
        return RefNode(ref=name)

    def _map_struct(
        self,
        type_id: TypeId,
        fields: Iterable[Field],
        registry: ReferenceRegistry,
        exclude: str | None = None,
    ) -> PropertiesNode:
        """Build a properties schema, splitting optional fields from required ones."""
        required: dict[str, SchemaNode] = {}
        optional: dict[str, SchemaNode] = {}

        for f in fields:
            if f.name == exclude:
                continue
            field_schema = self._map_type(f.type_id, registry)
            if isinstance(self.lookup(f.type_id).shape, OptionalShape):
                optional[f.name] = field_schema
            else:
                required[f.name] = field_schema

        return PropertiesNode(
            required=required,
            optional=optional,
            additional_properties=self.config.allows_additional_properties(type_id),
        )

    def _map_enum(self, type_id: TypeId, shape: TaggedEnumShape, registry: ReferenceRegistry) -> DiscriminatorNode:
        """Build a discriminator schema, one properties schema per variant."""
        mapping = {}
        for variant in shape.variants:
            mapping[variant.discriminant] = self._map_struct(
                type_id,
                variant.fields,
                registry,
                exclude=shape.tag_field,
            )
        return DiscriminatorNode(tag=shape.tag_field, mapping=mapping)


def map_types(
    root_ids: TypeId | Iterable[TypeId],
    lookup: DescriptorLookup,
    config: GeneratorConfig | None = None,
) -> SchemaDocument:
    """Map root types to a schema document; see SchemaMapper.map."""
    return SchemaMapper(lookup, config).map(root_ids)
