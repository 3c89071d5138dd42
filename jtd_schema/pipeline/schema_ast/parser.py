"""
JSON Type Definition parser that builds an AST.

Reads schema text (or the equivalent dictionaries) back into a
SchemaDocument and rejects anything outside the grammar handled by this
package: the empty, type, elements, properties, discriminator and ref
forms, each optionally nullable.
"""

from __future__ import annotations

import json
from typing import Any

from ..errors import SchemaSyntaxError
from .nodes import (
    TYPE_NAMES,
    DiscriminatorNode,
    ElementsNode,
    EmptyNode,
    PropertiesNode,
    RefNode,
    SchemaDocument,
    SchemaNode,
    TypeNode,
)

# Keywords that select a schema form
FORM_KEYWORDS = {
    "type": "type",
    "elements": "elements",
    "properties": "properties",
    "optionalProperties": "properties",
    "additionalProperties": "properties",
    "discriminator": "discriminator",
    "mapping": "discriminator",
    "ref": "ref",
}

SHARED_KEYWORDS = {"nullable"}


class SchemaParser:
    """Parses JSON Type Definition documents into an AST."""

    def parse(self, schema: dict[str, Any]) -> SchemaDocument:
        """
        Parse a root schema into a document.

        Args:
            schema: The root schema dictionary

        Returns:
            SchemaDocument with parsed definitions and root node
        """
        if not isinstance(schema, dict):
            raise SchemaSyntaxError("schema must be an object")

        definitions_schema = schema.get("definitions", {})
        if not isinstance(definitions_schema, dict):
            raise SchemaSyntaxError("definitions must be an object", "#/definitions")

        document = SchemaDocument()
        for name, def_schema in definitions_schema.items():
            document.definitions[name] = self._parse_schema_node(def_schema, f"#/definitions/{name}")

        root_schema = {k: v for k, v in schema.items() if k != "definitions"}
        document.root = self._parse_schema_node(root_schema, "#")

        missing = document.unresolved_refs()
        if missing:
            raise SchemaSyntaxError(f"unresolved refs: {', '.join(missing)}")

        return document

    def _parse_schema_node(self, schema: Any, path: str) -> SchemaNode:
        """
        Parse a schema node recursively.

        Args:
            schema: The schema dictionary
            path: Current path in schema (for error messages)

        Returns:
            Appropriate SchemaNode subclass
        """
        if not isinstance(schema, dict):
            raise SchemaSyntaxError("schema must be an object", path)

        if "definitions" in schema:
            raise SchemaSyntaxError("definitions are only allowed at the root", path)

        forms = set()
        for key in schema:
            if key in FORM_KEYWORDS:
                forms.add(FORM_KEYWORDS[key])
            elif key not in SHARED_KEYWORDS:
                raise SchemaSyntaxError(f"unknown keyword {key!r}", path)

        if len(forms) > 1:
            raise SchemaSyntaxError(f"mixed schema forms: {', '.join(sorted(forms))}", path)

        nullable = schema.get("nullable", False)
        if not isinstance(nullable, bool):
            raise SchemaSyntaxError("nullable must be a boolean", path)

        form = forms.pop() if forms else None

        if form is None:
            return EmptyNode(nullable=nullable)

        if form == "type":
            return self._parse_type_node(schema, path, nullable)

        if form == "elements":
            elements = self._parse_schema_node(schema["elements"], f"{path}/elements")
            return ElementsNode(elements=elements, nullable=nullable)

        if form == "properties":
            return self._parse_properties_node(schema, path, nullable)

        if form == "discriminator":
            return self._parse_discriminator_node(schema, path, nullable)

        ref = schema["ref"]
        if not isinstance(ref, str):
            raise SchemaSyntaxError("ref must be a string", path)
        return RefNode(ref=ref, nullable=nullable)

    def _parse_type_node(self, schema: dict[str, Any], path: str, nullable: bool) -> TypeNode:
        """Parse a type-form node."""
        type_name = schema["type"]
        if type_name not in TYPE_NAMES:
            raise SchemaSyntaxError(f"unknown type {type_name!r}", f"{path}/type")
        return TypeNode(type_name=type_name, nullable=nullable)

    def _parse_members(self, schema: dict[str, Any], key: str, path: str) -> dict[str, SchemaNode]:
        """Parse one of the properties/optionalProperties member maps."""
        members_schema = schema.get(key, {})
        if not isinstance(members_schema, dict):
            raise SchemaSyntaxError(f"{key} must be an object", f"{path}/{key}")
        return {name: self._parse_schema_node(member, f"{path}/{key}/{name}") for name, member in members_schema.items()}

    def _parse_properties_node(self, schema: dict[str, Any], path: str, nullable: bool) -> PropertiesNode:
        """Parse a properties-form node."""
        if "properties" not in schema and "optionalProperties" not in schema:
            raise SchemaSyntaxError("additionalProperties requires properties or optionalProperties", path)

        required = self._parse_members(schema, "properties", path)
        optional = self._parse_members(schema, "optionalProperties", path)

        shared = set(required) & set(optional)
        if shared:
            raise SchemaSyntaxError(f"properties both required and optional: {', '.join(sorted(shared))}", path)

        additional = schema.get("additionalProperties", False)
        if not isinstance(additional, bool):
            raise SchemaSyntaxError("additionalProperties must be a boolean", path)

        return PropertiesNode(
            required=required,
            optional=optional,
            additional_properties=additional,
            nullable=nullable,
        )

    def _parse_discriminator_node(self, schema: dict[str, Any], path: str, nullable: bool) -> DiscriminatorNode:
        """Parse a discriminator-form node."""
        tag = schema.get("discriminator")
        if not isinstance(tag, str):
            raise SchemaSyntaxError("discriminator must be a string", path)

        mapping_schema = schema.get("mapping")
        if not isinstance(mapping_schema, dict):
            raise SchemaSyntaxError("mapping must be an object", path)

        mapping = {}
        for discriminant, variant_schema in mapping_schema.items():
            variant_path = f"{path}/mapping/{discriminant}"
            variant = self._parse_schema_node(variant_schema, variant_path)
            if not isinstance(variant, PropertiesNode):
                raise SchemaSyntaxError("mapping values must be properties schemas", variant_path)
            if variant.nullable:
                raise SchemaSyntaxError("mapping values must not be nullable", variant_path)
            if tag in variant.required or tag in variant.optional:
                raise SchemaSyntaxError(f"mapping value redefines the tag {tag!r}", variant_path)
            mapping[discriminant] = variant

        return DiscriminatorNode(tag=tag, mapping=mapping, nullable=nullable)


def document_from_dict(schema: dict[str, Any]) -> SchemaDocument:
    """Build a SchemaDocument from an already decoded root schema."""
    return SchemaParser().parse(schema)


def parse(text: str) -> SchemaDocument:
    """Parse schema text into a SchemaDocument."""
    try:
        schema = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaSyntaxError(f"invalid JSON: {e}") from e
    return document_from_dict(schema)
