"""Tests for shadowgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from shadowgen.config import ConfigError, ShadowConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, ShadowConfig)
    assert config.root == tmp_path.resolve()
    assert config.markers.opt_in == "//  @ShadowTesting"
    assert config.markers.force_ignore == "//  @ForceIgnore"
    assert config.markers.lines == 4
    assert config.scan.extensions == [".swift"]
    assert config.scan.ignore_paths == []
    assert config.generation.class_prefix == "Test"
    assert config.generation.variable_prefix == "test_"
    assert config.generation.guard_macro == "TESTING"
    assert config.generation.write_files is True
    assert config.generation.append_to_source is False
    assert config.generation.strict is False
    assert config.generation.templates_dir is None
    assert config.indexer.executable == "sourcekitten"
    assert config.indexer.jobs == 1
    assert config.canary.macro == "TESTING"
    assert config.output_path == tmp_path.resolve() / "ShadowClasses"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".shadowgen.yml"
    config_file.write_text(
        """
markers:
  opt_in: "// @Shadow"
  force_ignore: "// @Skip"
  lines: 10
scan:
  extensions: [".swift", ".swiftinterface"]
  ignore_paths:
    - "Pods/"
    - "Vendor/"
generation:
  class_prefix: "Shadow"
  variable_prefix: "exposed_"
  guard_macro: "DEBUG"
  output_dir: "Generated/Shadows"
  write_files: false
  append_to_source: "yes"
  dump_structure: true
  strict: true
  templates_dir: "templates"
indexer:
  executable: "/usr/local/bin/sourcekitten"
  timeout: 12
  jobs: 4
canary:
  macro: "DEBUG"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.root == tmp_path.resolve()
    assert config.markers.opt_in == "// @Shadow"
    assert config.markers.force_ignore == "// @Skip"
    assert config.markers.lines == 10
    assert config.scan.extensions == [".swift", ".swiftinterface"]
    assert config.scan.ignore_paths == ["Pods/", "Vendor/"]
    generation = config.generation
    assert generation.class_prefix == "Shadow"
    assert generation.variable_prefix == "exposed_"
    assert generation.guard_macro == "DEBUG"
    assert generation.write_files is False
    assert generation.append_to_source is True
    assert generation.dump_structure is True
    assert generation.strict is True
    assert generation.templates_dir == tmp_path.resolve() / "templates"
    assert config.output_path == tmp_path.resolve() / "Generated/Shadows"
    assert config.indexer.executable == "/usr/local/bin/sourcekitten"
    assert config.indexer.timeout == 12.0
    assert config.indexer.jobs == 4
    assert config.canary.macro == "DEBUG"


def test_invalid_values_fall_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / ".shadowgen.yml").write_text(
        """
markers: "not a mapping"
generation:
  write_files: "maybe"
indexer:
  timeout: "soon"
  jobs: 0
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.markers.lines == 4
    assert config.generation.write_files is True
    assert config.indexer.timeout == 30.0
    assert config.indexer.jobs == 1


def test_marker_window_must_be_positive(tmp_path: Path) -> None:
    (tmp_path / ".shadowgen.yml").write_text("markers:\n  lines: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_malformed_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".shadowgen.yml").write_text("markers: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_mapping_root_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".shadowgen.yml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / ".shadowgen.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path).generation.class_prefix == "Test"


def test_with_overrides_only_replaces_given_values(shadow_config: ShadowConfig) -> None:
    overridden = shadow_config.with_overrides(append_to_source=True, jobs=3)

    assert overridden.generation.append_to_source is True
    assert overridden.generation.write_files is True
    assert overridden.indexer.jobs == 3
    assert overridden.indexer.timeout == 30.0
    assert shadow_config.generation.append_to_source is False
    assert shadow_config.indexer.jobs == 1
