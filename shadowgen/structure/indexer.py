"""Adapters around the external structure indexer (SourceKitten)."""

from __future__ import annotations

import json
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..logging import get_logger
from .nodes import StructuralNode, StructureError, parse_structure

_LOGGER = get_logger("indexer")


class IndexerError(RuntimeError):
    """Raised when the indexer cannot produce a structure tree for a file."""


@dataclass
class IndexResult:
    """Decoded structure tree and the raw text it was parsed from."""

    root: StructuralNode
    raw: str


class Indexer(ABC):
    """Contract for tools that turn one source file into a structure tree."""

    @abstractmethod
    def index(self, path: Path) -> IndexResult:
        """Return the structure tree for ``path`` or raise ``IndexerError``."""


class SourceKittenIndexer(Indexer):
    """Runs ``sourcekitten structure --file <path>`` and decodes its JSON output."""

    def __init__(
        self,
        executable: str = "sourcekitten",
        *,
        timeout: Optional[float] = 30.0,
        runner: Callable[[Sequence[str], Optional[float]], str] | None = None,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self._runner = runner or self._default_runner

    def index(self, path: Path) -> IndexResult:
        args = [self.executable, "structure", "--file", str(path)]
        _LOGGER.debug("Running %s", " ".join(args))
        output = self._runner(args, self.timeout)
        try:
            payload = json.loads(output)
        except json.JSONDecodeError as exc:
            raise IndexerError(f"{self.executable} returned unparseable output for {path}: {exc}") from exc
        try:
            root = parse_structure(payload)
        except StructureError as exc:
            raise IndexerError(f"{self.executable} returned an invalid structure for {path}: {exc}") from exc
        return IndexResult(root=root, raw=output)

    def _default_runner(self, args: Sequence[str], timeout: Optional[float]) -> str:
        try:
            completed = subprocess.run(
                list(args),
                check=True,
                capture_output=True,
                timeout=timeout,
            )
        except FileNotFoundError as exc:
            raise IndexerError(
                f"Unable to locate '{self.executable}'. Install SourceKitten or configure indexer.executable."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise IndexerError(f"{self.executable} timed out after {timeout} seconds") from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
            raise IndexerError(f"{self.executable} failed with exit code {exc.returncode}: {stderr}") from exc
        except OSError as exc:
            raise IndexerError(f"Unable to run '{self.executable}': {exc}") from exc
        try:
            return completed.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise IndexerError(f"{self.executable} produced output that is not valid UTF-8: {exc}") from exc


__all__ = ["IndexResult", "Indexer", "IndexerError", "SourceKittenIndexer"]
