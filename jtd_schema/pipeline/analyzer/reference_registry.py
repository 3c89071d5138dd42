"""
Reference registry for definition naming.

Assigns definition names to struct and enum types, detects name collisions
and accumulates the definition bodies. One registry serves exactly one
generation call.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass

from ..descriptors.shapes import TypeId
from ..errors import NameCollisionError, RegistryError
from ..schema_ast.nodes import SchemaNode

logger = logging.getLogger(__name__)


@dataclass
class ReservedName:
    """A definition slot: reserved first, finalized once its body is built."""

    name: str = ""
    type_id: TypeId = ""
    body: SchemaNode | None = None

    @property
    def is_finalized(self) -> bool:
        return self.body is not None


class ReferenceRegistry:
    """Maps TypeIds to definition names and collects definition bodies."""

    def __init__(self):
        self._names: dict[TypeId, str] = {}
        self._slots: dict[str, ReservedName] = {}
        self._ref_counts: Counter[str] = Counter()

    def reserve_or_get(self, type_id: TypeId, candidate_name: str) -> tuple[str, bool]:
        """
        Reserve a definition name for a type, or return the existing one.

        Args:
            type_id: The type to name
            candidate_name: Name produced by the naming strategy

        Returns:
            (name, already_reserved)

        Raises:
            NameCollisionError: If the name already belongs to another type
        """
        existing = self._names.get(type_id)
        if existing is not None:
            return existing, True

        slot = self._slots.get(candidate_name)
        if slot is not None:
            raise NameCollisionError(candidate_name, (slot.type_id, type_id))

        self._names[type_id] = candidate_name
        self._slots[candidate_name] = ReservedName(name=candidate_name, type_id=type_id)
        logger.debug("Reserved definition %r for %s", candidate_name, type_id)
        return candidate_name, False

    def finalize(self, name: str, node: SchemaNode) -> None:
        """Store the body of a reserved definition. Allowed once per name."""
        slot = self._slots.get(name)
        if slot is None:
            raise RegistryError(f"Definition {name!r} was never reserved")
        if slot.is_finalized:
            raise RegistryError(f"Definition {name!r} is already finalized")
        slot.body = node

    def add_reference(self, name: str) -> None:
        """Record that a ref to this definition was emitted."""
        self._ref_counts[name] += 1

    def reference_count(self, name: str) -> int:
        return self._ref_counts[name]

    def name_of(self, type_id: TypeId) -> str | None:
        return self._names.get(type_id)

    def discard(self, name: str) -> SchemaNode:
        """Remove a finalized definition and return its body."""
        slot = self._slots.get(name)
        if slot is None or not slot.is_finalized:
            raise RegistryError(f"Definition {name!r} is not finalized")
        del self._slots[name]
        del self._names[slot.type_id]
        self._ref_counts.pop(name, None)
        return slot.body

    def definitions(self) -> dict[str, SchemaNode]:
        """
        Return the accumulated definitions in reservation order.

        Raises:
            RegistryError: If a reserved definition was never finalized
        """
        pending = [name for name, slot in self._slots.items() if not slot.is_finalized]
        if pending:
            raise RegistryError(f"Definitions reserved but not finalized: {', '.join(pending)}")
        return {name: slot.body for name, slot in self._slots.items()}
