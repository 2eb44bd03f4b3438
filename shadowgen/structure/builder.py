"""Reconstructs the shadow model of a file from its structure tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from ..logging import ShadowLogger, file_logger, get_logger
from ..models import (
    CapturedClass,
    CapturedFunction,
    CapturedStruct,
    CapturedVariable,
    GenerationUnit,
)
from .declarations import DeclarationRecord
from .nodes import NodeKind, StructuralNode

_LOGGER = get_logger("builder")


@dataclass
class MemberAccumulator:
    """Members collected from one class body, plus diagnostics."""

    variables: List[CapturedVariable] = field(default_factory=list)
    functions: List[CapturedFunction] = field(default_factory=list)
    structs: List[CapturedStruct] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    unclassified: List[str] = field(default_factory=list)

    def to_class(self, name: str) -> CapturedClass:
        return CapturedClass(
            name=name,
            variables=tuple(self.variables),
            functions=tuple(self.functions),
            structs=tuple(self.structs),
        )


@dataclass
class BuildResult:
    """Generation unit for one file and the diagnostics gathered while building it."""

    unit: GenerationUnit
    warnings: List[str] = field(default_factory=list)
    unclassified: List[str] = field(default_factory=list)


def build_members(
    members: Iterable[StructuralNode], *, logger: Optional[ShadowLogger] = None
) -> MemberAccumulator:
    """Walk a class body once, in declaration order, capturing file-private members.

    The only state carried between members is the pending chained
    declaration: a file-private variable without an explicit type, waiting
    for the call expression that follows it to reveal the type.
    """
    log = logger or _LOGGER
    accumulator = MemberAccumulator()
    pending: Optional[DeclarationRecord] = None
    for node in members:
        pending = _capture_member(DeclarationRecord(node), pending, accumulator, log)
    if pending is not None:
        _warn_unresolved_chain(pending, accumulator, log)
    return accumulator


def _capture_member(
    record: DeclarationRecord,
    pending: Optional[DeclarationRecord],
    accumulator: MemberAccumulator,
    log: ShadowLogger = _LOGGER,
) -> Optional[DeclarationRecord]:
    """Fold one member into ``accumulator`` and return the new pending chain."""
    if record.is_ignorable(pending):
        return pending

    if record.is_instance_variable() and record.is_file_private():
        name = record.require_name()
        if record.type_name is not None:
            if pending is not None:
                _warn_unresolved_chain(pending, accumulator, log)
            accumulator.variables.append(
                CapturedVariable(
                    name=name,
                    type=record.type_name,
                    attributes=record.attribute_list(accumulator.warnings),
                )
            )
            log.debug("    %s: %s", name, record.type_name)
            return None
        if pending is not None:
            _warn_unresolved_chain(pending, accumulator, log)
        log.debug("        Chain definition part 1 for: %s", name)
        return record

    if record.is_call() and pending is not None:
        resolved_type = record.require_name()
        name = pending.require_name()
        accumulator.variables.append(
            CapturedVariable(
                name=name,
                type=resolved_type,
                attributes=pending.attribute_list(accumulator.warnings),
            )
        )
        log.debug("        Chain definition part 2 for: %s", name)
        log.debug("    %s: %s", name, resolved_type)
        return None

    if record.is_file_private() and record.is_instance_method():
        signature = record.function_signature()
        accumulator.functions.append(
            CapturedFunction(
                signature=signature,
                attributes=record.attribute_list(accumulator.warnings),
            )
        )
        log.debug("    func: %s", signature)
        return pending

    if record.is_file_private() and record.is_struct():
        accumulator.structs.append(build_struct(record.node, accumulator.warnings))
        log.debug("    struct: %s", record.name)
        return pending

    message = f"Unclassified member {record.node.describe()} omitted from shadow model"
    log.warning("%s; raw node: %r", message, dict(record.node.payload))
    accumulator.warnings.append(message)
    accumulator.unclassified.append(record.node.describe())
    return pending


def _warn_unresolved_chain(
    pending: DeclarationRecord, accumulator: MemberAccumulator, log: ShadowLogger = _LOGGER
) -> None:
    message = (
        f"Unresolved chained declaration '{pending.name}': "
        "no call expression followed the inferred-type variable"
    )
    log.warning(message)
    accumulator.warnings.append(message)


def build_struct(node: StructuralNode, warnings: Optional[List[str]] = None) -> CapturedStruct:
    """Mirror every stored field of a struct, regardless of visibility."""
    struct = DeclarationRecord(node)
    variables = []
    for child in node.children_of_kind(NodeKind.INSTANCE_VARIABLE):
        field_record = DeclarationRecord(child)
        variables.append(
            CapturedVariable(
                name=field_record.require_name(),
                type=field_record.require_type_name(),
                attributes=field_record.attribute_list(warnings),
            )
        )
    return CapturedStruct(name=struct.require_name(), variables=tuple(variables))


def build_generation_unit(
    root: StructuralNode,
    source: Path,
    *,
    class_prefix: str = "Test",
) -> BuildResult:
    """Assemble the generation unit for every class and struct directly under ``root``.

    Declarations whose name already carries ``class_prefix`` are generated
    artifacts and are never scanned again.
    """
    log = file_logger("builder", source)
    classes: List[CapturedClass] = []
    structs: List[CapturedStruct] = []
    warnings: List[str] = []
    unclassified: List[str] = []

    for node in root.substructure:
        record = DeclarationRecord(node)
        if node.kind is NodeKind.CLASS:
            name = record.require_name()
            if name.startswith(class_prefix):
                log.debug("  Skipping analysis of %s as it is a test class", name)
                continue
            log.debug("  Analysing %s", name)
            members = build_members(node.substructure, logger=log)
            classes.append(members.to_class(name))
            warnings.extend(members.warnings)
            unclassified.extend(members.unclassified)
        elif node.kind is NodeKind.STRUCT:
            name = record.require_name()
            if name.startswith(class_prefix):
                log.debug("  Skipping analysis of %s as it is a test struct", name)
                continue
            log.debug("  Analysing %s", name)
            structs.append(build_struct(node, warnings))
        elif record.is_comment_mark():
            continue
        else:
            log.debug("  Skipping analysis of %s as it is not a class", node.describe())

    unit = GenerationUnit(source=source, classes=tuple(classes), structs=tuple(structs))
    return BuildResult(unit=unit, warnings=warnings, unclassified=unclassified)


__all__ = [
    "BuildResult",
    "MemberAccumulator",
    "build_generation_unit",
    "build_members",
    "build_struct",
]
