"""Logging utilities for shadowgen commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping, Tuple, Union

_LOGGER_NAME = "shadowgen"

ShadowLogger = Union[logging.Logger, "FileLoggerAdapter"]


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the shadowgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class FileLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every message with the source file it concerns.

    Files may be processed on a worker pool, so per-file messages need to
    say which file they belong to once they interleave.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['source']}] {msg}", kwargs


def file_logger(name: str, source: Path | str) -> FileLoggerAdapter:
    """Return a module logger whose records are tagged with ``source``."""
    label = source.name if isinstance(source, Path) else source
    return FileLoggerAdapter(get_logger(name), {"source": label})


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the shadowgen logger.

    Module loggers propagate into it; it does not propagate further, so the
    CLI output is not duplicated by a root handler.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[shadowgen] %(levelname)s %(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)
        # The log file always records the full debug trace.
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["FileLoggerAdapter", "ShadowLogger", "configure_logging", "file_logger", "get_logger"]
