"""Opt-in / opt-out marker detection for candidate source files."""

from __future__ import annotations

from enum import Enum
from itertools import islice
from pathlib import Path
from typing import Iterable

from .config import MarkerConfig


class MarkerDecision(str, Enum):
    """What the marker window says about a file."""

    GENERATE = "generate"
    NOT_MARKED = "not-marked"
    FORCE_IGNORED = "force-ignored"


class MarkerScanner:
    """Checks the first lines of a file for the shadow-testing markers.

    Matching is a case-insensitive literal search on each trimmed line. The
    force-ignore marker wins wherever it appears in the window.
    """

    def __init__(self, config: MarkerConfig | None = None) -> None:
        self.config = config or MarkerConfig()
        self._opt_in = self.config.opt_in.strip().lower()
        self._force_ignore = self.config.force_ignore.strip().lower()

    def decide_lines(self, lines: Iterable[str]) -> MarkerDecision:
        found_opt_in = False
        for line in islice(lines, self.config.lines):
            lowered = line.strip().lower()
            if self._force_ignore and self._force_ignore in lowered:
                return MarkerDecision.FORCE_IGNORED
            if self._opt_in and self._opt_in in lowered:
                found_opt_in = True
        return MarkerDecision.GENERATE if found_opt_in else MarkerDecision.NOT_MARKED

    def decide(self, path: Path) -> MarkerDecision:
        """Read only the marker window of ``path``; raises ``OSError`` on read failure."""
        with path.open(encoding="utf-8", errors="replace") as handle:
            return self.decide_lines(handle)


__all__ = ["MarkerDecision", "MarkerScanner"]
