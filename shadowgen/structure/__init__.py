"""Structure tree parsing, classification, and shadow model building."""

from __future__ import annotations

from .nodes import NodeKind, StructuralNode, StructureError, parse_structure
from .indexer import IndexResult, Indexer, IndexerError, SourceKittenIndexer
from .declarations import DeclarationRecord
from .builder import BuildResult, build_generation_unit, build_members, build_struct

__all__ = [
    "BuildResult",
    "DeclarationRecord",
    "IndexResult",
    "Indexer",
    "IndexerError",
    "NodeKind",
    "SourceKittenIndexer",
    "StructuralNode",
    "StructureError",
    "build_generation_unit",
    "build_members",
    "build_struct",
    "parse_structure",
]
