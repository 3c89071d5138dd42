"""
Configuration for the schema generator pipeline.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RootInlining(str, Enum):
    """Whether the root type may be inlined instead of referenced.

    Only struct and enum roots are affected; other shapes are always inline.
    """

    ALWAYS_HOIST = "always-hoist"  # Root is always a ref into definitions
    INLINE_IF_SOLE_AND_UNREFERENCED = "inline-if-sole-and-unreferenced"  # Default


@dataclass
class GeneratorConfig:
    """Configuration options for schema generation."""

    # Definition naming: "short", "long", "pascal" or a callable taking a TypeDescriptor
    naming: str | Callable[[Any], str] = "short"

    # Per-type additionalProperties override, keyed by TypeId (default False)
    additional_properties: dict[str, bool] = field(default_factory=dict)

    # Root inlining policy
    root_inlining: RootInlining = RootInlining.INLINE_IF_SOLE_AND_UNREFERENCED

    # Stop validation at the first violation instead of collecting all of them
    fail_fast: bool = False

    # Indentation of the serialized output (None = compact canonical form)
    indent: int | None = None

    def allows_additional_properties(self, type_id: str) -> bool:
        return self.additional_properties.get(type_id, False)

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if k == "root_inlining":
                config.root_inlining = RootInlining(v)
            elif k == "additional_properties" and isinstance(v, dict):
                config.additional_properties = {str(type_id): bool(flag) for type_id, flag in v.items()}
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary.

        Custom naming callables have no dictionary form and are reported by name.
        """
        naming = self.naming if isinstance(self.naming, str) else getattr(self.naming, "__name__", repr(self.naming))
        return {
            "naming": naming,
            "additional_properties": dict(self.additional_properties),
            "root_inlining": self.root_inlining.value,
            "fail_fast": self.fail_fast,
            "indent": self.indent,
        }
