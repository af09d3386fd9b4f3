"""Resolution of the texmathml cache directory."""

from __future__ import annotations

import os
from pathlib import Path


__all__ = ["cache_dir", "cache_root"]


def cache_root() -> Path:
    """Return the directory holding texmathml caches.

    ``TEXMATHML_CACHE_DIR`` wins over ``$XDG_CACHE_HOME/texmathml``, which wins
    over ``~/.cache/texmathml``. The environment is read on every call.
    """
    explicit = os.environ.get("TEXMATHML_CACHE_DIR")
    if explicit:
        return Path(explicit).expanduser()
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache).expanduser() / "texmathml"
    return Path.home() / ".cache" / "texmathml"


def cache_dir(*parts: str, create: bool = True) -> Path:
    """Return a directory under :func:`cache_root`, creating it when requested."""
    target = cache_root().joinpath(*parts)
    if create:
        target.mkdir(parents=True, exist_ok=True)
    return target
