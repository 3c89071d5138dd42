"""
Pipeline - JSON Type Definition schema generator.

This module provides a multi-phase architecture for generating schemas
from type descriptors:

1. Phase 1 (Validator): Reject descriptors with no IDL representation
2. Phase 2 (Mapper): Build the Schema AST using a per-call reference registry
3. Phase 3 (Serializer): Render the Schema AST as canonical JSON text
"""

from __future__ import annotations

from .analyzer import ReferenceRegistry, SchemaMapper, Validator, map_types, validate
from .config import GeneratorConfig, RootInlining
from .errors import (
    MappingError,
    NameCollisionError,
    RegistryError,
    SchemaSyntaxError,
    ValidationError,
    Violation,
    ViolationKind,
)
from .generator import PipelineGenerator
from .schema_ast import SchemaDocument, parse
from .serializer import serialize

__all__ = [
    "PipelineGenerator",
    "GeneratorConfig",
    "RootInlining",
    "SchemaMapper",
    "ReferenceRegistry",
    "Validator",
    "SchemaDocument",
    "map_types",
    "validate",
    "serialize",
    "parse",
    "MappingError",
    "ValidationError",
    "NameCollisionError",
    "RegistryError",
    "SchemaSyntaxError",
    "Violation",
    "ViolationKind",
]
