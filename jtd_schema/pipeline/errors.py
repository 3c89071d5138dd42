"""
Errors raised by the schema generation pipeline.

A generation call either returns a complete document or raises exactly one
MappingError subclass. The remaining classes belong to the parser and to the
registry's internal consistency checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ViolationKind(str, Enum):
    """Reasons a type descriptor has no representation in the IDL."""

    UNIT_STRUCT = "UnitStruct"
    TUPLE_STRUCT = "TupleStruct"
    EMPTY_STRUCT = "EmptyStruct"
    DUPLICATE_FIELD = "DuplicateField"
    MIXED_ENUM_VARIANTS = "MixedEnumVariants"
    DUPLICATE_DISCRIMINANT = "DuplicateDiscriminant"
    NON_INTERNAL_TAGGING = "NonInternalTagging"
    HETEROGENEOUS_TUPLE = "HeterogeneousTuple"
    UNSUPPORTED_PRIMITIVE = "UnsupportedPrimitive"
    INLINE_CYCLE = "InlineCycle"


@dataclass(frozen=True)
class Violation:
    """A single validation failure.

    Attributes:
        kind: What is wrong
        type_id: The offending type
        field: Field or variant name, when the problem is local to one
        message: Human-readable explanation
    """

    kind: ViolationKind
    type_id: str
    field: str | None = None
    message: str = ""

    def __str__(self) -> str:
        location = self.type_id if self.field is None else f"{self.type_id}.{self.field}"
        if self.message:
            return f"{self.kind.value} at {location}: {self.message}"
        return f"{self.kind.value} at {location}"


class MappingError(Exception):
    """Base class for every failure of a generation call."""

    pass


class ValidationError(MappingError):
    """Raised when the descriptor graph contains shapes the IDL cannot express.

    The first violation is the primary one; the full list is kept for callers
    that want to report everything at once.
    """

    def __init__(self, violations: list[Violation]):
        if not violations:
            raise ValueError("ValidationError requires at least one violation")
        self.violations = list(violations)
        message = str(self.violations[0])
        if len(self.violations) > 1:
            message += f" (and {len(self.violations) - 1} more)"
        super().__init__(message)

    @property
    def violation(self) -> Violation:
        return self.violations[0]

    @property
    def kind(self) -> ViolationKind:
        return self.violation.kind

    @property
    def type_id(self) -> str:
        return self.violation.type_id

    @property
    def field(self) -> str | None:
        return self.violation.field


class NameCollisionError(MappingError):
    """Raised when two distinct types would share one definition name."""

    def __init__(self, name: str, ids: tuple[str, ...]):
        self.name = name
        self.ids = tuple(ids)
        joined = ", ".join(f"`{type_id}`" for type_id in self.ids)
        super().__init__(f'definition name "{name}" is shared by types {joined}')


class RegistryError(RuntimeError):
    """Raised when the reference registry is used out of order."""

    pass


class SchemaSyntaxError(ValueError):
    """Raised when schema text does not follow the IDL grammar."""

    def __init__(self, message: str, path: str = "#"):
        self.path = path
        super().__init__(f"{path}: {message}")


class ReflectionError(TypeError):
    """Raised when a Python annotation cannot be described at all."""

    pass
