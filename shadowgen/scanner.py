"""Source file discovery."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Sequence

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".build",
    "DerivedData",
    "node_modules",
    "__pycache__",
}


def _normalise_prefix(prefix: str) -> str:
    return prefix.strip().lstrip("/").replace("\\", "/")


def _is_ignored(rel_path: str, prefixes: Sequence[str]) -> bool:
    return any(prefix and rel_path.startswith(prefix) for prefix in prefixes)


def _iter_files(root: Path, prefixes: Sequence[str]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        filtered_dirs = []
        for name in sorted(dirnames):
            if name.startswith(".") or name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _is_ignored(f"{rel_path}/", prefixes):
                continue
            filtered_dirs.append(name)
        dirnames[:] = filtered_dirs

        for filename in sorted(filenames):
            if filename.startswith("."):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _is_ignored(rel_path, prefixes):
                continue
            yield current_dir / filename


def discover_files(
    root: Path,
    *,
    extensions: Sequence[str] = (".swift",),
    ignore_paths: Sequence[str] = (),
) -> List[Path]:
    """Return source files under ``root`` sorted by root-relative posix path.

    ``ignore_paths`` are prefixes matched against the root-relative posix
    path; a prefix ending in ``/`` excludes a whole directory.
    """
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Scan path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Scan path is not a directory: {root}")

    prefixes = [_normalise_prefix(prefix) for prefix in ignore_paths]
    suffixes = tuple(extensions)
    files = [path for path in _iter_files(root_path, prefixes) if path.name.endswith(suffixes)]
    return sorted(files, key=lambda path: path.relative_to(root_path).as_posix())


__all__ = ["discover_files"]
