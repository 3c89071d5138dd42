"""
Name resolver for definition names.

A naming strategy turns a struct or enum descriptor into the key of its
entry in the document's definitions. Strategies must give distinct names to
distinct types; the reference registry reports any collision.
"""

from __future__ import annotations

from collections.abc import Callable

from ...utils import snake_to_pascal_case
from ..descriptors.shapes import TypeDescriptor

NamingStrategy = Callable[[TypeDescriptor], str]


def short_name(descriptor: TypeDescriptor) -> str:
    """The type's own name, e.g. "Node"."""
    return descriptor.name


def long_name(descriptor: TypeDescriptor) -> str:
    """The type's name prefixed with its module, e.g. "app.models.Node"."""
    return descriptor.qualified_name


def pascal_name(descriptor: TypeDescriptor) -> str:
    """The type's name converted to PascalCase, e.g. "tree_node" -> "TreeNode"."""
    return snake_to_pascal_case(descriptor.name)


NAMING_STRATEGIES: dict[str, NamingStrategy] = {
    "short": short_name,
    "long": long_name,
    "pascal": pascal_name,
}


class NameResolver:
    """Resolves definition names with a configured strategy."""

    def __init__(self, naming: str | NamingStrategy = "short"):
        """
        Initialize the resolver.

        Args:
            naming: Name of a built-in strategy or a custom callable
        """
        if isinstance(naming, str):
            if naming not in NAMING_STRATEGIES:
                raise ValueError(f"Unknown naming strategy {naming!r}, expected one of {', '.join(NAMING_STRATEGIES)}")
            self.strategy = NAMING_STRATEGIES[naming]
        elif callable(naming):
            self.strategy = naming
        else:
            raise TypeError(f"Naming strategy must be a string or a callable, got {type(naming).__name__}")

    def definition_name(self, descriptor: TypeDescriptor) -> str:
        """Return the definition name for a descriptor."""
        name = self.strategy(descriptor)
        if not isinstance(name, str) or not name:
            raise ValueError(f"Naming strategy returned an invalid name for {descriptor.id!r}: {name!r}")
        return name
