"""
Serializer module.

Renders schema documents as canonical JSON Type Definition text.
"""

from __future__ import annotations

from .json_serializer import document_to_dict, node_to_dict, serialize

__all__ = [
    "serialize",
    "document_to_dict",
    "node_to_dict",
]
