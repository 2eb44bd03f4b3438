from __future__ import annotations

from pathlib import Path

import pytest

from shadowgen.config import ShadowConfig


@pytest.fixture
def shadow_config(tmp_path: Path) -> ShadowConfig:
    """Default configuration rooted at a throwaway project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return ShadowConfig(root=root.resolve())
