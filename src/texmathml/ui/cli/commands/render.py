"""Implementation of the ``texmathml render`` command."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from urllib.parse import quote_plus

import typer

from texmathml.core.cache import DiskMathCache, MathCache, MemoryMathCache
from texmathml.core.config import RenderConfig, load_config
from texmathml.core.embed import PageIndex, embed_mathml
from texmathml.core.exceptions import ConfigurationError
from texmathml.core.renderer import RenderEngine, RenderFailure, RenderRequest

from .._options import (
    CacheDirOption,
    ConfigOption,
    DebugOption,
    ExistingPageOption,
    ForceOption,
    LabelOption,
    NoCacheOption,
    RawOption,
    SettingOption,
    TagIdOption,
    TexArgument,
    TimeoutOption,
    UrlOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, set_cli_state


def encode_cli_settings(values: Sequence[str] | None) -> str | None:
    """Encode ``KEY[=VALUE]`` pairs into a LaTeXML query string.

    Bare keys stay bare so boolean switches such as ``pmml`` survive as-is.
    """
    if not values:
        return None
    parts: list[str] = []
    for item in values:
        key, sep, value = item.partition("=")
        if not key.strip():
            raise typer.BadParameter(f"Invalid setting '{item}'.", param_hint="--setting")
        encoded = quote_plus(key.strip())
        parts.append(f"{encoded}={quote_plus(value)}" if sep else encoded)
    return "&".join(parts)


def build_config(
    config_path: Path | None = None,
    urls: Sequence[str] | None = None,
    timeout: float | None = None,
) -> RenderConfig:
    """Merge the optional configuration file with command-line overrides."""
    base = load_config(config_path) if config_path is not None else RenderConfig()
    data = base.model_dump()
    if urls:
        data["daemon_urls"] = list(urls) if len(urls) > 1 else urls[0]
    if timeout is not None:
        data["timeout"] = timeout
    return RenderConfig.from_mapping(data)


def render(
    tex: TexArgument,
    config: ConfigOption = None,
    url: UrlOption = None,
    timeout: TimeoutOption = None,
    setting: SettingOption = None,
    label: LabelOption = None,
    tag_id: TagIdOption = None,
    existing_page: ExistingPageOption = None,
    raw: RawOption = False,
    force: ForceOption = False,
    cache_dir: CacheDirOption = None,
    no_cache: NoCacheOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Convert a TeX expression to MathML and print the embeddable fragment."""
    state = set_cli_state(verbosity=verbose, debug=debug)

    try:
        render_config = build_config(config, url, timeout)
    except ConfigurationError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=2) from exc

    cache: MathCache = MemoryMathCache() if no_cache else DiskMathCache(cache_dir)
    engine = RenderEngine(
        render_config,
        cache=cache,
        emitter=CliEmitter(state),
        page_exists=PageIndex(existing_page or ()),
    )
    request = RenderRequest(
        tex=tex,
        settings=encode_cli_settings(setting),
        force_refresh=force,
        label=label,
        tag_id=tag_id,
    )

    result = engine.render(request)
    if isinstance(result, RenderFailure):
        emit_error(result.message)
        raise typer.Exit(code=1)

    if raw:
        typer.echo(result.mathml)
        return
    typer.echo(
        embed_mathml(
            result.mathml,
            label,
            tag_id,
            page_exists=engine.page_exists,
            script_path=render_config.script_path,
        )
    )


__all__ = ["build_config", "encode_cli_settings", "render"]
