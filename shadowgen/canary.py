"""Detects test classes that escaped the testing-only conditional region."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

from .logging import get_logger

_LOGGER = get_logger("canary")

_OPEN_IF = re.compile(r"#if", re.IGNORECASE)
_END_IF = re.compile(r"#endif", re.IGNORECASE)


@dataclass(frozen=True)
class CanaryMatch:
    """A test class declared outside any testing-only region."""

    path: Path
    line_number: int
    line: str


class TestClassCanary:
    """Line scanner tracking ``#if`` nesting around the testing macro.

    Nesting is tracked by depth only, so a test class, macro start, and
    macro end placed on one line can fool the scan.
    """

    __test__ = False

    def __init__(self, macro: str = "TESTING", class_prefix: str = "Test") -> None:
        self._macro = re.compile(re.escape(macro), re.IGNORECASE)
        self._test_class = re.compile(rf"class\s+{re.escape(class_prefix)}", re.IGNORECASE)

    def scan_lines(self, lines: Iterable[str], path: Path) -> List[CanaryMatch]:
        matches: List[CanaryMatch] = []
        macro_depths: List[int] = []
        depth = 0
        for index, raw_line in enumerate(lines):
            line = raw_line.strip()
            if _OPEN_IF.search(line):
                if self._macro.search(line):
                    macro_depths.append(depth)
                depth += 1
                continue
            if _END_IF.search(line):
                depth -= 1
                if macro_depths and macro_depths[-1] == depth:
                    macro_depths.pop()
                continue
            if not macro_depths and self._test_class.search(line):
                matches.append(CanaryMatch(path=path, line_number=index + 1, line=line))
        return matches

    def scan_file(self, path: Path) -> List[CanaryMatch]:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _LOGGER.warning("Couldn't read file at %s: %s", path, exc)
            return []
        return self.scan_lines(text.split("\n"), path)

    def scan_files(self, paths: Sequence[Path]) -> List[CanaryMatch]:
        matches: List[CanaryMatch] = []
        for path in paths:
            matches.extend(self.scan_file(path))
        return matches


def format_match(match: CanaryMatch, root: Path | None = None) -> str:
    path = match.path
    if root is not None:
        try:
            path = match.path.relative_to(root)
        except ValueError:
            pass
    return f"[\n\tFILE: {path.as_posix()}, LINE: {match.line_number}\n\tFOUND: \"{match.line}\"\n],"


__all__ = ["CanaryMatch", "TestClassCanary", "format_match"]
