"""Shadow artifact rendering."""

from __future__ import annotations

from .renderer import ShadowRenderer, attribute_prefix

__all__ = ["ShadowRenderer", "attribute_prefix"]
