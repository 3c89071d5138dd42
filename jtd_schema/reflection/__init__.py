"""
Reflection adapters producing type descriptors from Python types.
"""

from __future__ import annotations

from .dataclass_adapter import (
    DataclassReflector,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    TaggedUnion,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    describe,
)

__all__ = [
    "DataclassReflector",
    "TaggedUnion",
    "describe",
    "Int8",
    "UInt8",
    "Int16",
    "UInt16",
    "Int32",
    "UInt32",
    "Int64",
    "UInt64",
    "Float32",
    "Float64",
]
