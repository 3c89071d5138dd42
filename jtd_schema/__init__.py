"""JSON Type Definition Schema Generator

A Python package for generating JSON Type Definition (RFC 8927) schemas
from type descriptors, with reference deduplication for shared and
recursive types, shape validation and canonical JSON output.
"""

__version__ = "1.0.0"

from .pipeline import (
    GeneratorConfig,
    MappingError,
    NameCollisionError,
    PipelineGenerator,
    RootInlining,
    SchemaDocument,
    SchemaMapper,
    ValidationError,
    Violation,
    ViolationKind,
    map_types,
    parse,
    serialize,
    validate,
)

__all__ = [
    "PipelineGenerator",
    "GeneratorConfig",
    "RootInlining",
    "SchemaMapper",
    "SchemaDocument",
    "map_types",
    "validate",
    "serialize",
    "parse",
    "MappingError",
    "ValidationError",
    "NameCollisionError",
    "Violation",
    "ViolationKind",
]
