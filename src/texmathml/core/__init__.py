"""Core render pipeline for converting TeX to MathML."""

from __future__ import annotations

from .cache import CacheEntry, DiskMathCache, MathCache, MemoryMathCache, fingerprint
from .client import ConversionClient, RequestsConversionClient
from .config import RenderConfig, load_config
from .embed import PageIndex, embed_mathml, format_error
from .exceptions import (
    ConfigurationError,
    ConversionError,
    ConversionTimeoutError,
    ConversionTransportError,
    ErrorKind,
    InvalidResponseError,
    MathRenderingError,
)
from .hosts import pick_host
from .renderer import (
    RenderEngine,
    RenderFailure,
    RenderRequest,
    RenderResult,
    RenderSession,
    RenderState,
    RenderSuccess,
)
from .settings import encode_post_data, resolve_settings, serialize_settings
from .validation import is_valid_mathml, parse_envelope


__all__ = [
    "CacheEntry",
    "ConfigurationError",
    "ConversionClient",
    "ConversionError",
    "ConversionTimeoutError",
    "ConversionTransportError",
    "DiskMathCache",
    "ErrorKind",
    "InvalidResponseError",
    "MathCache",
    "MathRenderingError",
    "MemoryMathCache",
    "PageIndex",
    "RenderConfig",
    "RenderEngine",
    "RenderFailure",
    "RenderRequest",
    "RenderResult",
    "RenderSession",
    "RenderState",
    "RenderSuccess",
    "RequestsConversionClient",
    "embed_mathml",
    "encode_post_data",
    "fingerprint",
    "format_error",
    "is_valid_mathml",
    "load_config",
    "parse_envelope",
    "pick_host",
    "resolve_settings",
    "serialize_settings",
]
