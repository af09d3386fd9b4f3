"""Primary public API for texmathml."""

from __future__ import annotations

from texmathml.core import (
    CacheEntry,
    ConfigurationError,
    ConversionClient,
    DiskMathCache,
    ErrorKind,
    MathRenderingError,
    MemoryMathCache,
    PageIndex,
    RenderConfig,
    RenderEngine,
    RenderFailure,
    RenderRequest,
    RenderResult,
    RenderSuccess,
    RequestsConversionClient,
    embed_mathml,
    is_valid_mathml,
    load_config,
    serialize_settings,
)
from texmathml.version import get_version


__version__ = get_version()

__all__ = [
    "CacheEntry",
    "ConfigurationError",
    "ConversionClient",
    "DiskMathCache",
    "ErrorKind",
    "MathRenderingError",
    "MemoryMathCache",
    "PageIndex",
    "RenderConfig",
    "RenderEngine",
    "RenderFailure",
    "RenderRequest",
    "RenderResult",
    "RenderSuccess",
    "RequestsConversionClient",
    "__version__",
    "embed_mathml",
    "get_version",
    "is_valid_mathml",
    "load_config",
    "serialize_settings",
]
