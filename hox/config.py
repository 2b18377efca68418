"""Renderer configuration."""

from pathlib import Path
from typing import FrozenSet, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

HTML_VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)


class ConfigError(ValueError):
    """Raised when a render configuration file cannot be used."""


class RenderOptions(BaseModel):
    """Options controlling how a node tree is written out."""

    void_elements: FrozenSet[str] = Field(
        default=HTML_VOID_ELEMENTS,
        alias="voidElements",
        description="Tags written without children or a closing tag.",
    )
    self_close_void: bool = Field(
        False,
        alias="selfCloseVoid",
        description="Write void elements as <br/> instead of <br>.",
    )
    doctype: Optional[str] = Field(
        None, description="Doctype emitted before the root node, e.g. 'html'."
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


def load_render_options(path: Path) -> RenderOptions:
    """Read render options from a YAML mapping."""

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of render options.")
    try:
        return RenderOptions.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid render options in {path}: {exc}") from exc


__all__ = ["ConfigError", "HTML_VOID_ELEMENTS", "RenderOptions", "load_render_options"]
