"""Classification of structure nodes into queryable declaration records."""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..logging import get_logger
from ..models import Attribute, Parameter
from .nodes import NodeKind, StructuralNode, StructureError

_LOGGER = get_logger("declarations")

_NO_ARGUMENTS = "()"
_LABELS_TERMINATOR = ":)"


class DeclarationRecord:
    """Read-only classified view over a single ``StructuralNode``."""

    __slots__ = ("node",)

    def __init__(self, node: StructuralNode) -> None:
        self.node = node

    def __repr__(self) -> str:
        return f"DeclarationRecord({self.node.describe()})"

    # ------------------------------------------------------------------
    # Field access

    @property
    def name(self) -> Optional[str]:
        return self.node.name

    @property
    def type_name(self) -> Optional[str]:
        return self.node.type_name

    def require_name(self) -> str:
        if self.node.name is None:
            raise StructureError(f"{self.node.raw_kind} declaration has no name")
        return self.node.name

    def require_type_name(self) -> str:
        if self.node.type_name is None:
            raise StructureError(
                f"{self.node.raw_kind} '{self.node.name}' has no declared type"
            )
        return self.node.type_name

    # ------------------------------------------------------------------
    # Predicates

    def is_comment_mark(self) -> bool:
        return self.node.kind is NodeKind.COMMENT_MARK

    def is_computed_property(self) -> bool:
        # A property body surfaces as a conditional statement rather than a stored value.
        return self.node.kind is NodeKind.IF_STATEMENT

    def is_instance_variable(self) -> bool:
        return self.node.kind is NodeKind.INSTANCE_VARIABLE

    def is_instance_method(self) -> bool:
        return self.node.kind is NodeKind.INSTANCE_METHOD

    def is_struct(self) -> bool:
        return self.node.kind is NodeKind.STRUCT

    def is_call(self) -> bool:
        return self.node.kind is NodeKind.CALL

    def is_file_private(self) -> bool:
        return self.node.is_file_private

    def is_ignorable(self, pending: Optional["DeclarationRecord"]) -> bool:
        """Return True when the member cannot contribute to the shadow model."""
        if self.is_comment_mark():
            _LOGGER.debug("Ignoring MARK declaration")
            return True
        if self.is_computed_property():
            _LOGGER.debug("Ignoring computed property")
            return True
        if not self.is_file_private() and pending is None:
            _LOGGER.debug("Ignoring non-fileprivate member %s", self.node.describe())
            return True
        return False

    # ------------------------------------------------------------------
    # Derived values

    def attribute_list(self, warnings: Optional[List[str]] = None) -> Tuple[Attribute, ...]:
        """Map raw attribute tags onto ``Attribute``, dropping unknown tags loudly."""
        attributes: List[Attribute] = []
        for tag in self.node.attribute_tags:
            attribute = Attribute.from_tag(tag)
            if attribute is None:
                message = f"Dropping unsupported attribute '{tag}' on {self.node.describe()}"
                _LOGGER.warning(message)
                if warnings is not None:
                    warnings.append(message)
                continue
            attributes.append(attribute)
        return tuple(attributes)

    def function_signature(self) -> str:
        """Rebuild ``base(label internal: Type, ...)`` from the flattened method name.

        The indexer reports methods as ``foo(bar:baz:)``; internal parameter
        names and types come from the method's parameter children, matched by
        position.
        """
        name = self.require_name()
        if name.endswith(_NO_ARGUMENTS):
            return name

        base, separator, remainder = name.partition("(")
        if not separator or not remainder.endswith(_LABELS_TERMINATOR):
            raise StructureError(f"Cannot split method name '{name}' into base and labels")
        labels = remainder[: -len(_LABELS_TERMINATOR)].split(":")

        parameters = self.node.children_of_kind(NodeKind.PARAMETER)
        if len(labels) != len(parameters):
            raise StructureError(
                f"Method '{name}' declares {len(labels)} argument label(s) "
                f"but has {len(parameters)} parameter node(s)"
            )

        arguments = []
        for label, parameter in zip(labels, parameters):
            record = DeclarationRecord(parameter)
            argument = Parameter(
                label=label,
                internal_name=record.require_name(),
                type_name=record.require_type_name(),
            )
            arguments.append(argument.render())
        return f"{base}({', '.join(arguments)})"


__all__ = ["DeclarationRecord"]
