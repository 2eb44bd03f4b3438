"""Configuration loading for shadowgen (.shadowgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".shadowgen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class MarkerConfig:
    """Opt-in and opt-out markers searched for at the top of each file."""

    opt_in: str = "//  @ShadowTesting"
    force_ignore: str = "//  @ForceIgnore"
    lines: int = 4


@dataclass
class ScanConfig:
    """Which files are candidates for generation."""

    extensions: List[str] = field(default_factory=lambda: [".swift"])
    ignore_paths: List[str] = field(default_factory=list)


@dataclass
class GenerationConfig:
    """Naming, output mode, and rendering settings."""

    class_prefix: str = "Test"
    variable_prefix: str = "test_"
    guard_macro: str = "TESTING"
    output_dir: str = "ShadowClasses"
    write_files: bool = True
    append_to_source: bool = False
    dump_structure: bool = False
    strict: bool = False
    templates_dir: Optional[Path] = None


@dataclass
class IndexerConfig:
    """External structure indexer invocation."""

    executable: str = "sourcekitten"
    timeout: Optional[float] = 30.0
    jobs: int = 1


@dataclass
class CanaryConfig:
    """Settings for the stray test class check."""

    macro: str = "TESTING"


@dataclass
class ShadowConfig:
    """Represents the settings defined in .shadowgen.yml."""

    root: Path
    markers: MarkerConfig = field(default_factory=MarkerConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    indexer: IndexerConfig = field(default_factory=IndexerConfig)
    canary: CanaryConfig = field(default_factory=CanaryConfig)

    @property
    def output_path(self) -> Path:
        return self.root / self.generation.output_dir

    def with_overrides(
        self,
        *,
        append_to_source: Optional[bool] = None,
        write_files: Optional[bool] = None,
        dump_structure: Optional[bool] = None,
        strict: Optional[bool] = None,
        jobs: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> "ShadowConfig":
        """Return a copy with command-line overrides applied."""
        generation = replace(
            self.generation,
            append_to_source=_pick(append_to_source, self.generation.append_to_source),
            write_files=_pick(write_files, self.generation.write_files),
            dump_structure=_pick(dump_structure, self.generation.dump_structure),
            strict=_pick(strict, self.generation.strict),
        )
        indexer = replace(
            self.indexer,
            jobs=_pick(jobs, self.indexer.jobs),
            timeout=_pick(timeout, self.indexer.timeout),
        )
        return replace(self, generation=generation, indexer=indexer)


def load_config(config_path: Path) -> ShadowConfig:
    """Load configuration from disk.

    ``config_path`` may be the scan root or the config file itself. The
    directory holding the config file is the scan root.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ShadowConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = ShadowConfig(root=root)

    marker_data = _as_dict(data.get("markers"))
    markers = MarkerConfig(
        opt_in=_as_str(marker_data.get("opt_in")) or defaults.markers.opt_in,
        force_ignore=_as_str(marker_data.get("force_ignore")) or defaults.markers.force_ignore,
        lines=_as_int(marker_data.get("lines"), defaults.markers.lines),
    )
    if markers.lines < 1:
        raise ConfigError("markers.lines must be at least 1")

    scan_data = _as_dict(data.get("scan"))
    scan = ScanConfig(
        extensions=_as_str_list(scan_data.get("extensions")) or defaults.scan.extensions,
        ignore_paths=_as_str_list(scan_data.get("ignore_paths")),
    )

    generation_data = _as_dict(data.get("generation"))
    templates_dir_str = _as_str(generation_data.get("templates_dir"))
    base = defaults.generation
    generation = GenerationConfig(
        class_prefix=_as_str(generation_data.get("class_prefix")) or base.class_prefix,
        variable_prefix=_as_str(generation_data.get("variable_prefix")) or base.variable_prefix,
        guard_macro=_as_str(generation_data.get("guard_macro")) or base.guard_macro,
        output_dir=_as_str(generation_data.get("output_dir")) or base.output_dir,
        write_files=_as_bool(generation_data.get("write_files"), base.write_files),
        append_to_source=_as_bool(generation_data.get("append_to_source"), base.append_to_source),
        dump_structure=_as_bool(generation_data.get("dump_structure"), base.dump_structure),
        strict=_as_bool(generation_data.get("strict"), base.strict),
        templates_dir=root / templates_dir_str if templates_dir_str else None,
    )

    indexer_data = _as_dict(data.get("indexer"))
    indexer = IndexerConfig(
        executable=_as_str(indexer_data.get("executable")) or defaults.indexer.executable,
        timeout=_as_float(indexer_data.get("timeout"), defaults.indexer.timeout),
        jobs=max(1, _as_int(indexer_data.get("jobs"), defaults.indexer.jobs)),
    )

    canary_data = _as_dict(data.get("canary"))
    canary = CanaryConfig(macro=_as_str(canary_data.get("macro")) or defaults.canary.macro)

    return ShadowConfig(
        root=root,
        markers=markers,
        scan=scan,
        generation=generation,
        indexer=indexer,
        canary=canary,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _pick(override: Any, current: Any) -> Any:
    return current if override is None else override


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any, default: Optional[float]) -> Optional[float]:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default
    return default


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default
    return default


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CanaryConfig",
    "ConfigError",
    "GenerationConfig",
    "IndexerConfig",
    "MarkerConfig",
    "ScanConfig",
    "ShadowConfig",
    "load_config",
]
