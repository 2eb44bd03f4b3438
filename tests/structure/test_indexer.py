"""Tests for the SourceKitten indexer adapter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Sequence

import pytest

from shadowgen.structure import IndexerError, NodeKind, SourceKittenIndexer
from tests._fixtures.structure_builder import file_payload, klass


class RecordingRunner:
    def __init__(self, output: str) -> None:
        self.output = output
        self.calls: List[Sequence[str]] = []
        self.timeouts: List[Optional[float]] = []

    def __call__(self, args: Sequence[str], timeout: Optional[float]) -> str:
        self.calls.append(list(args))
        self.timeouts.append(timeout)
        return self.output


def test_indexer_invokes_structure_command(tmp_path: Path) -> None:
    output = json.dumps(file_payload(klass("Foo")))
    runner = RecordingRunner(output)
    indexer = SourceKittenIndexer("/opt/bin/sourcekitten", timeout=5.0, runner=runner)
    source = tmp_path / "Foo.swift"

    result = indexer.index(source)

    assert runner.calls == [["/opt/bin/sourcekitten", "structure", "--file", str(source)]]
    assert runner.timeouts == [5.0]
    assert result.raw == output
    assert result.root.substructure[0].kind is NodeKind.CLASS


def test_indexer_rejects_unparseable_output(tmp_path: Path) -> None:
    indexer = SourceKittenIndexer(runner=RecordingRunner("not json"))
    with pytest.raises(IndexerError, match="unparseable"):
        indexer.index(tmp_path / "Foo.swift")


def test_indexer_rejects_invalid_structure(tmp_path: Path) -> None:
    indexer = SourceKittenIndexer(runner=RecordingRunner("[1, 2, 3]"))
    with pytest.raises(IndexerError, match="invalid structure"):
        indexer.index(tmp_path / "Foo.swift")


def test_missing_executable_is_reported(tmp_path: Path) -> None:
    indexer = SourceKittenIndexer("shadowgen-no-such-indexer-binary")
    with pytest.raises(IndexerError, match="Unable to locate"):
        indexer.index(tmp_path / "Foo.swift")


def _script(directory: Path, body: str, *, mode: int = 0o755) -> Path:
    script = directory / "sourcekitten"
    script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    script.chmod(mode)
    return script


def test_non_zero_exit_is_reported_with_stderr(tmp_path: Path) -> None:
    script = _script(tmp_path, 'echo "parse failure" >&2\nexit 1')
    indexer = SourceKittenIndexer(str(script))

    with pytest.raises(IndexerError, match="exit code 1: parse failure"):
        indexer.index(tmp_path / "Foo.swift")


def test_slow_indexer_times_out(tmp_path: Path) -> None:
    script = _script(tmp_path, "exec sleep 5")
    indexer = SourceKittenIndexer(str(script), timeout=0.1)

    with pytest.raises(IndexerError, match="timed out after 0.1 seconds"):
        indexer.index(tmp_path / "Foo.swift")


def test_non_executable_indexer_is_reported(tmp_path: Path) -> None:
    script = _script(tmp_path, "echo '{}'", mode=0o644)
    indexer = SourceKittenIndexer(str(script))

    with pytest.raises(IndexerError, match="Unable to run"):
        indexer.index(tmp_path / "Foo.swift")


def test_non_utf8_output_is_reported(tmp_path: Path) -> None:
    script = _script(tmp_path, "printf '{\"key.name\": \"\\377\"}'")
    indexer = SourceKittenIndexer(str(script))

    with pytest.raises(IndexerError, match="not valid UTF-8"):
        indexer.index(tmp_path / "Foo.swift")


def test_default_runner_returns_decoded_stdout(tmp_path: Path) -> None:
    script = _script(tmp_path, "echo '{\"key.substructure\": []}'")
    indexer = SourceKittenIndexer(str(script))

    result = indexer.index(tmp_path / "Foo.swift")

    assert result.root.substructure == ()
    assert result.raw.strip() == '{"key.substructure": []}'
