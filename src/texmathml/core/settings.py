"""Serialisation of LaTeXML daemon settings into query-string fragments."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import re
from urllib.parse import quote_plus, urlencode


SettingsValue = str | Mapping[str, str | Sequence[str]]

# Array-style encoders emit ``key[0]=a&key[1]=b``; LaTeXML expects repeated keys.
_INDEX_SUFFIX = re.compile(r"%5B\d+%5D")


def serialize_settings(value: SettingsValue | None) -> str:
    """Return ``value`` encoded as a query-string fragment.

    Strings are returned untouched, so the function can safely be applied to
    its own output. Mappings expand list values into repeated keys, e.g.
    ``{"preload": ["amsmath.sty", "amsthm.sty"]}`` becomes
    ``preload=amsmath.sty&preload=amsthm.sty``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    pairs: list[tuple[str, str]] = []
    for key, item in value.items():
        if item is None:
            continue
        if isinstance(item, str):
            pairs.append((str(key), item))
            continue
        pairs.extend((str(key), str(entry)) for entry in item)
    return _INDEX_SUFFIX.sub("", urlencode(pairs))


def resolve_settings(
    instance_settings: SettingsValue | None,
    default_settings: SettingsValue,
) -> SettingsValue:
    """Return the per-request settings, falling back to the configured default."""
    if instance_settings:
        return instance_settings
    return default_settings


def encode_post_data(tex: str, settings: SettingsValue | None) -> str:
    """Build the form-encoded request body for a TeX expression."""
    serialized = serialize_settings(settings)
    texcmd = quote_plus(tex)
    if not serialized:
        return f"tex={texcmd}"
    return f"{serialized}&tex={texcmd}"


__all__ = ["SettingsValue", "encode_post_data", "resolve_settings", "serialize_settings"]
