"""Configuration models consumed by the render engine.

RenderConfig

`daemon_urls` (`str | list[str]`)
: Address of the LaTeXML daemon, or a list of addresses among which one is
  picked at random for every render.

`default_settings` (`str | dict[str, str | list[str]]`)
: Conversion options sent with requests that do not carry their own. Either
  an already encoded query string or a mapping whose list values expand into
  repeated keys.

`timeout` (`float`)
: Upper bound, in seconds, for a single daemon request.

`script_path` (`str`)
: Wiki script path prefixed to formula page links.

`user_agent` (`str | None`)
: User agent announced to the daemon.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from texmathml.core.exceptions import ConfigurationError


DEFAULT_LATEXML_URL = "http://localhost:8888"
DEFAULT_LATEXML_SETTINGS = (
    "format=xhtml&whatsin=math&whatsout=math&pmml&cmml&nodefaultresources"
    "&preload=LaTeX.pool&preload=article.cls&preload=amsmath.sty&preload=amsthm.sty"
    "&preload=amstext.sty&preload=amssymb.sty&preload=eucal.sty"
    "&preload=%5Bdvipsnames%5Dxcolor.sty&preload=url.sty&preload=hyperref.sty"
    "&preload=%5Bids%5Dlatexml.sty&preload=texvc"
)


class RenderConfig(BaseModel):
    """Daemon addresses, default settings and timeouts for MathML rendering."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    daemon_urls: str | list[str] = Field(default=DEFAULT_LATEXML_URL)
    default_settings: str | dict[str, str | list[str]] = Field(
        default=DEFAULT_LATEXML_SETTINGS
    )
    timeout: float = Field(default=240.0, gt=0)
    script_path: str = ""
    user_agent: str | None = None

    @field_validator("daemon_urls")
    @classmethod
    def _check_urls(cls, value: str | list[str]) -> str | list[str]:
        urls = [value] if isinstance(value, str) else value
        if not urls:
            raise ValueError("at least one LaTeXML daemon URL is required")
        if any(not url.strip() for url in urls):
            raise ValueError("LaTeXML daemon URLs must not be blank")
        return value

    @field_validator("script_path")
    @classmethod
    def _strip_script_path(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> RenderConfig:
        """Validate a raw mapping, reporting problems as configuration errors."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid render configuration: {exc}") from exc


def load_config(path: Path) -> RenderConfig:
    """Read a YAML configuration file into a :class:`RenderConfig`."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration '{path}': {exc}") from exc
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Configuration '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration '{path}' must contain a mapping.")
    return RenderConfig.from_mapping(data)


__all__ = [
    "DEFAULT_LATEXML_SETTINGS",
    "DEFAULT_LATEXML_URL",
    "RenderConfig",
    "load_config",
]
