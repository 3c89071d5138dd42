"""
Schema AST (Abstract Syntax Tree) module.

Contains the AST node definitions and the parser for JSON Type Definition
schema text.
"""

from __future__ import annotations

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
from .parser import SchemaParser, document_from_dict, parse

__all__ = [
    "SchemaNode",
    "EmptyNode",
    "TypeNode",
    "ElementsNode",
    "PropertiesNode",
    "DiscriminatorNode",
    "RefNode",
    "SchemaDocument",
    "TYPE_NAMES",
    "SchemaParser",
    "parse",
    "document_from_dict",
]
