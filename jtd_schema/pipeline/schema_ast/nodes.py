"""
AST (Abstract Syntax Tree) node definitions for JSON Type Definition schemas.

These nodes are the output of the mapper and the input of the serializer.
Each node is one of the IDL's schema forms and may be marked nullable.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass, field

# Type names of the "type" form
TYPE_NAMES = (
    "boolean",
    "string",
    "timestamp",
    "float32",
    "float64",
    "int8",
    "uint8",
    "int16",
    "uint16",
    "int32",
    "uint32",
)


@dataclass(frozen=True)
class SchemaNode:
    """Base class for all AST nodes."""

    nullable: bool = False

    def with_nullable(self, nullable: bool = True) -> SchemaNode:
        """Return a copy of this node with the given nullability."""
        if self.nullable == nullable:
            return self
        return dataclasses.replace(self, nullable=nullable)

    def children(self) -> Iterator[SchemaNode]:
        """Yield the direct sub-schemas of this node."""
        return iter(())


@dataclass(frozen=True)
class EmptyNode(SchemaNode):
    """Accepts any JSON value."""


@dataclass(frozen=True)
class TypeNode(SchemaNode):
    """A primitive value: boolean, string, timestamp, floats and sized integers."""

    type_name: str = "string"

    def __post_init__(self) -> None:
        if self.type_name not in TYPE_NAMES:
            raise ValueError(f"Unknown type name: {self.type_name!r}")


@dataclass(frozen=True)
class ElementsNode(SchemaNode):
    """An array whose elements all match one schema."""

    elements: SchemaNode = field(default_factory=EmptyNode)

    def children(self) -> Iterator[SchemaNode]:
        yield self.elements


@dataclass(frozen=True)
class PropertiesNode(SchemaNode):
    """An object with required and optional members.

    Key order follows field declaration order.
    """

    required: dict[str, SchemaNode] = field(default_factory=dict)
    optional: dict[str, SchemaNode] = field(default_factory=dict)
    additional_properties: bool = False

    def __post_init__(self) -> None:
        shared = set(self.required) & set(self.optional)
        if shared:
            raise ValueError(f"Properties both required and optional: {sorted(shared)}")

    def children(self) -> Iterator[SchemaNode]:
        yield from self.required.values()
        yield from self.optional.values()


@dataclass(frozen=True)
class DiscriminatorNode(SchemaNode):
    """A tagged union selecting a properties schema by a string tag."""

    tag: str = ""
    mapping: dict[str, PropertiesNode] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for discriminant, variant in self.mapping.items():
            if not isinstance(variant, PropertiesNode):
                raise ValueError(f"Mapping entry {discriminant!r} must be a properties schema")
            if variant.nullable:
                raise ValueError(f"Mapping entry {discriminant!r} must not be nullable")

    def children(self) -> Iterator[SchemaNode]:
        yield from self.mapping.values()


@dataclass(frozen=True)
class RefNode(SchemaNode):
    """A reference to an entry of the document's definitions."""

    ref: str = ""


@dataclass
class SchemaDocument:
    """Root of a generated schema: the root node plus its definitions."""

    root: SchemaNode = field(default_factory=EmptyNode)
    definitions: dict[str, SchemaNode] = field(default_factory=dict)

    def iter_nodes(self) -> Iterator[SchemaNode]:
        """Walk every node of the document, definitions first."""
        stack = list(reversed([*self.definitions.values(), self.root]))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children())))

    def iter_refs(self) -> Iterator[RefNode]:
        """Yield every ref node of the document."""
        for node in self.iter_nodes():
            if isinstance(node, RefNode):
                yield node

    def unresolved_refs(self) -> list[str]:
        """Return ref names with no matching definition, in discovery order."""
        missing = []
        for ref_node in self.iter_refs():
            if ref_node.ref not in self.definitions and ref_node.ref not in missing:
                missing.append(ref_node.ref)
        return missing
