"""Implementation of the ``texmathml clear-cache`` command."""

from __future__ import annotations

import typer

from texmathml.core.cache import DiskMathCache

from .._options import CacheDirOption


def clear_cache(cache_dir: CacheDirOption = None) -> None:
    """Remove cached MathML renderings."""
    cleared = DiskMathCache(cache_dir).clear()
    if not cleared:
        typer.echo("Cache already empty.")
        return
    for path in cleared:
        typer.echo(f"Removed {path}")


__all__ = ["clear_cache"]
