"""
Analyzer module.

Contains shape validation, definition naming, reference registration and the
mapper that builds the schema document.
"""

from __future__ import annotations

from .mapper import SchemaMapper, map_types
from .name_resolver import NAMING_STRATEGIES, NameResolver, NamingStrategy
from .reference_registry import ReferenceRegistry
from .validator import Validator, validate

__all__ = [
    "SchemaMapper",
    "map_types",
    "NameResolver",
    "NamingStrategy",
    "NAMING_STRATEGIES",
    "ReferenceRegistry",
    "Validator",
    "validate",
]
