"""
Serializer for schema documents.

Renders a SchemaDocument as canonical JSON Type Definition text. Keys are
emitted in a fixed order (definitions, form keywords, nullable) and member
maps keep their declaration order, so equal documents give equal text.
"""

from __future__ import annotations

import json
from typing import Any

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


def node_to_dict(node: SchemaNode) -> dict[str, Any]:
    """Convert a schema node to its canonical dictionary form."""
    if isinstance(node, EmptyNode):
        out: dict[str, Any] = {}
    elif isinstance(node, TypeNode):
        out = {"type": node.type_name}
    elif isinstance(node, ElementsNode):
        out = {"elements": node_to_dict(node.elements)}
    elif isinstance(node, PropertiesNode):
        # "properties" stays even when empty so the form remains recognizable
        out = {"properties": {name: node_to_dict(member) for name, member in node.required.items()}}
        if node.optional:
            out["optionalProperties"] = {name: node_to_dict(member) for name, member in node.optional.items()}
        if node.additional_properties:
            out["additionalProperties"] = True
    elif isinstance(node, DiscriminatorNode):
        out = {
            "discriminator": node.tag,
            "mapping": {discriminant: node_to_dict(variant) for discriminant, variant in node.mapping.items()},
        }
    elif isinstance(node, RefNode):
        out = {"ref": node.ref}
    else:
        raise TypeError(f"Unknown schema node: {type(node).__name__}")

    if node.nullable:
        out["nullable"] = True
    return out


def document_to_dict(document: SchemaDocument) -> dict[str, Any]:
    """Convert a document to its canonical dictionary form."""
    out: dict[str, Any] = {}
    if document.definitions:
        out["definitions"] = {name: node_to_dict(body) for name, body in document.definitions.items()}
    out.update(node_to_dict(document.root))
    return out


def serialize(document: SchemaDocument, indent: int | None = None) -> str:
    """
    Serialize a document to JSON text.

    Args:
        document: The document to render
        indent: Indentation for human-readable output; None gives the
            compact canonical form

    Returns:
        JSON text
    """
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(document_to_dict(document), indent=indent, separators=separators, ensure_ascii=False)
