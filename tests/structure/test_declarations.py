"""Tests for the declaration classifier."""

from __future__ import annotations

import pytest

from shadowgen.models import Attribute
from shadowgen.structure.declarations import DeclarationRecord
from shadowgen.structure.nodes import StructureError, parse_node
from tests._fixtures.structure_builder import INTERNAL, call, if_statement, mark, method, param, var


def _record(payload) -> DeclarationRecord:
    return DeclarationRecord(parse_node(payload))


def test_marks_and_computed_properties_are_ignorable() -> None:
    pending = _record(var("cache"))
    assert _record(mark()).is_ignorable(None)
    assert _record(mark()).is_ignorable(pending)
    assert _record(if_statement()).is_ignorable(None)
    assert _record(if_statement()).is_ignorable(pending)


def test_non_fileprivate_member_is_ignorable_only_without_pending_chain() -> None:
    internal_call = _record(call("Foo"))
    internal_var = _record(var("title", "String", accessibility=INTERNAL))

    assert internal_call.is_ignorable(None)
    assert internal_var.is_ignorable(None)
    assert not internal_call.is_ignorable(_record(var("cache")))


def test_fileprivate_member_is_not_ignorable() -> None:
    assert not _record(var("count", "Int")).is_ignorable(None)


def test_attribute_list_maps_known_tags() -> None:
    record = _record(var("delegate", "Delegate?", attributes=["weak", "objc", "override"]))
    assert record.attribute_list() == (Attribute.WEAK, Attribute.OBJC, Attribute.OVERRIDE)


def test_attribute_list_drops_unknown_tags_with_warning() -> None:
    record = _record(var("items", "[Int]", attributes=["lazy", "weak"]))
    warnings: list[str] = []

    assert record.attribute_list(warnings) == (Attribute.WEAK,)
    assert len(warnings) == 1
    assert "source.decl.attribute.lazy" in warnings[0]


def test_function_signature_without_arguments_is_unchanged() -> None:
    assert _record(method("reload()")).function_signature() == "reload()"


def test_function_signature_omits_matching_internal_name() -> None:
    record = _record(method("foo(bar:)", param("bar", "String")))
    assert record.function_signature() == "foo(bar: String)"


def test_function_signature_keeps_distinct_internal_name() -> None:
    record = _record(method("foo(bar:)", param("value", "String")))
    assert record.function_signature() == "foo(bar value: String)"


def test_function_signature_with_several_arguments() -> None:
    record = _record(
        method(
            "move(_:to:animated:)",
            param("item", "Item"),
            param("destination", "IndexPath"),
            param("animated", "Bool"),
        )
    )
    assert record.function_signature() == (
        "move(_ item: Item, to destination: IndexPath, animated: Bool)"
    )


def test_function_signature_ignores_non_parameter_children() -> None:
    payload = method("foo(bar:)", param("bar", "Int"))
    payload["key.substructure"].append(call("print"))
    assert _record(payload).function_signature() == "foo(bar: Int)"


def test_function_signature_label_count_mismatch_is_fatal() -> None:
    record = _record(method("foo(bar:baz:)", param("bar", "Int")))
    with pytest.raises(StructureError, match="2 argument label"):
        record.function_signature()


def test_function_signature_without_parameter_nodes_is_fatal() -> None:
    with pytest.raises(StructureError):
        _record(method("foo(bar:)")).function_signature()


def test_parameter_without_type_is_fatal() -> None:
    payload = method("foo(bar:)", {"key.kind": "source.lang.swift.decl.var.parameter", "key.name": "bar"})
    with pytest.raises(StructureError, match="no declared type"):
        _record(payload).function_signature()
