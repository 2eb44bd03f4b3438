"""Renders generation units into guarded shadow class source."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config import GenerationConfig
from ..models import Attribute, GenerationUnit

TEMPLATE_NAME = "shadow_file.swift.j2"
_DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


def attribute_prefix(attributes: Iterable[Attribute]) -> str:
    """Render attribute keywords ahead of a declaration.

    ``override`` is dropped: generated functions always declare it themselves.
    """
    return "".join(
        f"{attribute.keyword} " for attribute in attributes if attribute is not Attribute.OVERRIDE
    )


class ShadowRenderer:
    """Turns a ``GenerationUnit`` into the text of one shadow file.

    Output is deterministic and preserves the order of the model. A
    ``templates_dir`` may shadow the packaged template by name.
    """

    def __init__(self, config: GenerationConfig | None = None) -> None:
        self.config = config or GenerationConfig()
        self._env = self._create_env(self.config.templates_dir)

    def render(self, unit: GenerationUnit) -> str:
        template = self._env.get_template(TEMPLATE_NAME)
        rendered = template.render(
            unit=unit,
            guard_macro=self.config.guard_macro,
            class_prefix=self.config.class_prefix,
            variable_prefix=self.config.variable_prefix,
        )
        return rendered.rstrip("\n") + "\n"

    @staticmethod
    def _create_env(templates_dir: Optional[Path]) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(_DEFAULT_TEMPLATES_DIR))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        env.filters["attribute_prefix"] = attribute_prefix
        return env


__all__ = ["ShadowRenderer", "TEMPLATE_NAME", "attribute_prefix"]
