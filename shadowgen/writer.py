"""Persistence of rendered shadow artifacts."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from .logging import get_logger

_LOGGER = get_logger("writer")

SHADOW_SUFFIX = "ShadowClass"
STRUCTURE_SUFFIX = "ShadowJSON"


class OutputError(RuntimeError):
    """Raised when a generated artifact cannot be written."""


class OutputWriter:
    """Writes shadow files into the generated directory or appends them to sources."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def shadow_path(self, source: Path) -> Path:
        """``Foo.swift`` becomes ``<output_dir>/FooShadowClass.swift``."""
        return self.output_dir / f"{source.stem}{SHADOW_SUFFIX}{source.suffix}"

    def write_shadow_file(self, source: Path, contents: str) -> Path:
        target = self.shadow_path(source)
        self._write_atomic(target, contents)
        _LOGGER.debug("  Shadow class created at: %s", target)
        return target

    def write_structure_dump(self, source: Path, raw: str) -> Path:
        target = self.output_dir / f"{source.stem}{STRUCTURE_SUFFIX}.json"
        self._write_atomic(target, raw)
        return target

    def append_to_source(self, source: Path, contents: str) -> Path:
        """Append the rendered block to the end of ``source``. Destructive."""
        _LOGGER.warning("Appending shadow classes to source file %s", source)
        try:
            existing = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise OutputError(f"Attempting to append to file {source} failed: {exc}") from exc
        separator = "" if not existing or existing.endswith("\n") else "\n"
        self._write_atomic(source, f"{existing}{separator}{contents}")
        return source

    def _ensure_output_dir(self) -> None:
        if self.output_dir.is_dir():
            return
        _LOGGER.info("Creating directory at: %s", self.output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputError(f"Creating directory {self.output_dir} failed: {exc}") from exc

    def _write_atomic(self, target: Path, contents: str) -> None:
        if target.parent == self.output_dir:
            self._ensure_output_dir()
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(contents)
                if target.exists():
                    shutil.copymode(target, tmp_name)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise OutputError(f"Writing {target} failed: {exc}") from exc


__all__ = ["OutputError", "OutputWriter", "SHADOW_SUFFIX", "STRUCTURE_SUFFIX"]
