"""
Pipeline generator: descriptor graph in, schema text out.

1. Phase 1 (Validator): Reject shapes with no IDL representation
2. Phase 2 (Mapper): Build the Schema AST, hoisting named types into definitions
3. Phase 3 (Serializer): Render the document as canonical JSON
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .analyzer import SchemaMapper
from .config import GeneratorConfig
from .descriptors.shapes import DescriptorLookup, TypeId
from .schema_ast.nodes import SchemaDocument
from .serializer import serialize

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Generates a JSON Type Definition schema for one or more root types."""

    def __init__(
        self,
        root_ids: TypeId | Iterable[TypeId],
        lookup: DescriptorLookup,
        config: GeneratorConfig | None = None,
    ):
        self.root_ids = [root_ids] if isinstance(root_ids, str) else list(root_ids)
        self.config = config or GeneratorConfig()
        self.mapper = SchemaMapper(lookup, self.config)

    def build_document(self) -> SchemaDocument:
        """Run validation and mapping."""
        return self.mapper.map(self.root_ids)

    def generate(self) -> str:
        """Run the whole pipeline and return the schema text."""
        document = self.build_document()
        logger.debug("Serializing schema for %s", ", ".join(self.root_ids))
        return serialize(document, indent=self.config.indent)
