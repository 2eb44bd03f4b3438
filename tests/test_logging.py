"""Tests for shadowgen logging helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List

import pytest

from shadowgen.logging import configure_logging, file_logger, get_logger
from shadowgen.structure import build_generation_unit, parse_structure
from tests._fixtures.structure_builder import file_payload, klass, var


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.fixture
def builder_messages() -> Iterator[List[str]]:
    logger = get_logger("builder")
    handler = _ListHandler()
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler.messages
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)


def test_file_logger_prefixes_source_name() -> None:
    adapter = file_logger("builder", Path("/project/Sources/Widget.swift"))
    message, kwargs = adapter.process("Analysing Widget", {})
    assert message == "[Widget.swift] Analysing Widget"
    assert kwargs == {}
    assert adapter.logger is get_logger("builder")


def test_builder_diagnostics_carry_the_source_file(builder_messages: List[str]) -> None:
    root = parse_structure(file_payload(klass("Widget", var("thing"), var("count", "Int"))))

    build_generation_unit(root, Path("Widget.swift"))

    assert "[Widget.swift]   Analysing Widget" in builder_messages
    assert any(
        message.startswith("[Widget.swift] Unresolved chained declaration 'thing'")
        for message in builder_messages
    )
    assert "[Widget.swift]     count: Int" in builder_messages


def test_configure_logging_replaces_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "shadowgen.log"
    configure_logging()
    logger = configure_logging(verbose=False, log_file=log_file)

    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG
    assert logger.handlers[0].level == logging.INFO

    configure_logging()
    assert len(logger.handlers) == 1
