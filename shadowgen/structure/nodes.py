"""Typed view of the structure tree emitted by the external indexer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

FILE_PRIVATE = "source.lang.swift.accessibility.fileprivate"


class NodeKind(str, Enum):
    """Closed set of declaration kinds the model builder understands."""

    CLASS = "source.lang.swift.decl.class"
    STRUCT = "source.lang.swift.decl.struct"
    INSTANCE_VARIABLE = "source.lang.swift.decl.var.instance"
    INSTANCE_METHOD = "source.lang.swift.decl.function.method.instance"
    PARAMETER = "source.lang.swift.decl.var.parameter"
    COMMENT_MARK = "source.lang.swift.syntaxtype.comment.mark"
    IF_STATEMENT = "source.lang.swift.stmt.if"
    CALL = "source.lang.swift.expr.call"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_raw(cls, raw: str) -> "NodeKind":
        for kind in cls:
            if kind.value == raw and kind is not cls.UNRECOGNIZED:
                return kind
        return cls.UNRECOGNIZED


class StructureError(RuntimeError):
    """Raised when a structure node lacks a field its kind requires."""


@dataclass(frozen=True)
class StructuralNode:
    """One entry in the indexer's declaration tree.

    ``raw_kind`` and ``payload`` preserve the unparsed input so that
    UNRECOGNIZED nodes can still be reported verbatim.
    """

    kind: NodeKind
    raw_kind: str
    name: Optional[str] = None
    type_name: Optional[str] = None
    accessibility: Optional[str] = None
    substructure: Tuple["StructuralNode", ...] = ()
    attribute_tags: Tuple[str, ...] = ()
    payload: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_file_private(self) -> bool:
        return self.accessibility == FILE_PRIVATE

    def children_of_kind(self, kind: NodeKind) -> Tuple["StructuralNode", ...]:
        return tuple(child for child in self.substructure if child.kind is kind)

    def describe(self) -> str:
        """Short human-readable identity used in diagnostics."""
        label = self.name if self.name is not None else "<unnamed>"
        return f"{self.raw_kind} '{label}'"


def parse_structure(payload: object) -> StructuralNode:
    """Convert a decoded indexer payload into a tree of ``StructuralNode``.

    The top-level object (the file itself) has no ``key.kind``; every nested
    entry must carry one.
    """
    if not isinstance(payload, dict):
        raise StructureError("Indexer output must be a JSON object at the root")
    return StructuralNode(
        kind=NodeKind.UNRECOGNIZED,
        raw_kind="source.lang.swift.file",
        substructure=_parse_children(payload),
        payload=payload,
    )


def parse_node(payload: object) -> StructuralNode:
    if not isinstance(payload, dict):
        raise StructureError(f"Structure entry must be an object, got {type(payload).__name__}")
    raw_kind = payload.get("key.kind")
    if not isinstance(raw_kind, str):
        raise StructureError(f"Structure entry is missing key.kind: {payload!r}")
    return StructuralNode(
        kind=NodeKind.from_raw(raw_kind),
        raw_kind=raw_kind,
        name=_as_optional_str(payload, "key.name"),
        type_name=_as_optional_str(payload, "key.typename"),
        accessibility=_as_optional_str(payload, "key.accessibility"),
        substructure=_parse_children(payload),
        attribute_tags=_parse_attribute_tags(payload),
        payload=payload,
    )


def _parse_children(payload: Mapping[str, Any]) -> Tuple[StructuralNode, ...]:
    children = payload.get("key.substructure")
    if children is None:
        return ()
    if not isinstance(children, list):
        raise StructureError("key.substructure must be a list")
    return tuple(parse_node(child) for child in children)


def _parse_attribute_tags(payload: Mapping[str, Any]) -> Tuple[str, ...]:
    attributes = payload.get("key.attributes")
    if attributes is None:
        return ()
    if not isinstance(attributes, list):
        raise StructureError("key.attributes must be a list")
    tags = []
    for entry in attributes:
        tag = entry.get("key.attribute") if isinstance(entry, dict) else None
        if not isinstance(tag, str):
            raise StructureError(f"Attribute entry is missing key.attribute: {entry!r}")
        tags.append(tag)
    return tuple(tags)


def _as_optional_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise StructureError(f"{key} must be a string, got {type(value).__name__}")
    return value


__all__ = [
    "FILE_PRIVATE",
    "NodeKind",
    "StructuralNode",
    "StructureError",
    "parse_node",
    "parse_structure",
]
