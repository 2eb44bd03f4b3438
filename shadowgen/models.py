"""Core data models shared across shadowgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple


class Attribute(str, Enum):
    """Declaration attributes carried over into generated code."""

    WEAK = "source.decl.attribute.weak"
    OBJC = "source.decl.attribute.objc"
    OVERRIDE = "source.decl.attribute.override"
    REQUIRED = "source.decl.attribute.required"

    @property
    def keyword(self) -> str:
        return _ATTRIBUTE_KEYWORDS[self]

    @classmethod
    def from_tag(cls, tag: str) -> Optional["Attribute"]:
        for attribute in cls:
            if attribute.value == tag:
                return attribute
        return None


_ATTRIBUTE_KEYWORDS: Dict[Attribute, str] = {
    Attribute.WEAK: "weak",
    Attribute.OBJC: "@objc",
    Attribute.OVERRIDE: "override",
    Attribute.REQUIRED: "required",
}


@dataclass(frozen=True)
class CapturedVariable:
    """A file-private stored property with a resolved type."""

    name: str
    type: str
    attributes: Tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class Parameter:
    """One argument of a reconstructed function signature."""

    label: str
    internal_name: str
    type_name: str

    def render(self) -> str:
        if self.label == self.internal_name:
            return f"{self.label}: {self.type_name}"
        return f"{self.label} {self.internal_name}: {self.type_name}"

    def render_call_argument(self) -> str:
        if self.label == "_":
            return self.internal_name
        return f"{self.label}: {self.internal_name}"


@dataclass(frozen=True)
class CapturedFunction:
    """A file-private instance method and its full call signature."""

    signature: str
    attributes: Tuple[Attribute, ...] = ()

    @property
    def base_name(self) -> str:
        return parse_signature(self.signature)[0]

    @property
    def parameters(self) -> Tuple[Parameter, ...]:
        return parse_signature(self.signature)[1]

    def call_expression(self) -> str:
        base, parameters = parse_signature(self.signature)
        arguments = ", ".join(parameter.render_call_argument() for parameter in parameters)
        return f"{base}({arguments})"


@dataclass(frozen=True)
class CapturedStruct:
    """A struct mirrored field-for-field."""

    name: str
    variables: Tuple[CapturedVariable, ...] = ()


@dataclass(frozen=True)
class CapturedClass:
    """A class and the file-private members captured from it, in source order."""

    name: str
    variables: Tuple[CapturedVariable, ...] = ()
    functions: Tuple[CapturedFunction, ...] = ()
    structs: Tuple[CapturedStruct, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.variables or self.functions or self.structs)


@dataclass(frozen=True)
class GenerationUnit:
    """Complete per-file model handed to the renderer."""

    source: Path
    classes: Tuple[CapturedClass, ...] = ()
    structs: Tuple[CapturedStruct, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.classes or self.structs)


class FileStatus(str, Enum):
    """Outcome of processing one scanned file."""

    GENERATED = "generated"
    DRY_RUN = "dry-run"
    NOT_MARKED = "not-marked"
    FORCE_IGNORED = "force-ignored"
    FAILED = "failed"


class ErrorCode(str, Enum):
    """Machine-readable reason a file failed."""

    READ = "read"
    INDEXER = "indexer"
    STRUCTURE = "structure"
    OUTPUT = "output"
    UNCLASSIFIED = "unclassified"


@dataclass
class FileReport:
    """Per-file result recorded by the orchestrator."""

    path: Path
    status: FileStatus
    unit: Optional[GenerationUnit] = None
    rendered: Optional[str] = None
    outputs: List[Path] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error_code: Optional[ErrorCode] = None
    error: Optional[str] = None


def parse_signature(signature: str) -> Tuple[str, Tuple[Parameter, ...]]:
    """Split a reconstructed signature back into its base name and parameters.

    ``foo(bar value: String, baz: Int)`` yields ``("foo", (Parameter("bar",
    "value", "String"), Parameter("baz", "baz", "Int")))``. Types may contain
    commas inside brackets or parentheses (``[String: Int]``, ``(Int, Int)``).
    """
    if "(" not in signature or not signature.endswith(")"):
        return signature, ()
    base, _, rest = signature.partition("(")
    inner = rest[:-1]
    if not inner.strip():
        return base, ()
    parameters = []
    for entry in _split_top_level(inner):
        names, _, type_name = entry.partition(":")
        parts = names.split()
        if not parts:
            raise ValueError(f"Malformed parameter '{entry}' in signature '{signature}'")
        label = parts[0]
        internal_name = parts[1] if len(parts) > 1 else label
        parameters.append(Parameter(label=label, internal_name=internal_name, type_name=type_name.strip()))
    return base, tuple(parameters)


def _split_top_level(text: str) -> List[str]:
    entries: List[str] = []
    depth = 0
    current: List[str] = []
    previous = ""
    for char in text:
        if char in "([<":
            depth += 1
        elif char in ")]" or (char == ">" and previous != "-"):
            depth -= 1
        previous = char
        if char == "," and depth == 0:
            entries.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    if current:
        entries.append("".join(current).strip())
    return entries
