"""Cache contract and stores for rendered MathML."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
import hashlib
import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Any, Protocol, runtime_checkable

from texmathml.core.paths import cache_dir
from texmathml.core.settings import SettingsValue, serialize_settings


CACHE_NAMESPACE = "mathml"
_CACHE_FILENAME = "metadata.json"
_CACHE_VERSION = 1
_log = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class CacheEntry:
    """Rendered MathML persisted for a TeX expression."""

    tex: str
    mathml: str
    label: str | None = None
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["timestamp"] = self.timestamp.isoformat()
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> CacheEntry:
        stamp = payload.get("timestamp")
        timestamp = datetime.fromisoformat(stamp) if isinstance(stamp, str) else _now()
        return cls(
            tex=str(payload.get("tex", "")),
            mathml=str(payload.get("mathml", "")),
            label=payload.get("label"),
            timestamp=timestamp,
        )


@runtime_checkable
class MathCache(Protocol):
    """Key-value store holding rendered entries keyed by fingerprint."""

    def read(self, key: str) -> CacheEntry | None: ...

    def write(self, key: str, entry: CacheEntry) -> None: ...


def fingerprint(tex: str, settings: SettingsValue | None) -> str:
    """Return the cache key derived from the TeX source and its settings."""
    payload = {"tex": tex, "settings": serialize_settings(settings)}
    encoded = json.dumps(payload, sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class MemoryMathCache:
    """In-process cache, mostly useful for tests and single runs."""

    def __init__(self) -> None:
        self.entries: dict[str, CacheEntry] = {}

    def read(self, key: str) -> CacheEntry | None:
        return self.entries.get(key)

    def write(self, key: str, entry: CacheEntry) -> None:
        self.entries[key] = entry


class DiskMathCache:
    """Disk-backed cache storing entries in a JSON metadata file.

    Every write re-reads the metadata file, merges the new entry and flushes
    through an atomic rename, so processes sharing a directory keep each
    other's keys. A read miss reloads the file once. Metadata that cannot be
    read or that belongs to another cache version is ignored.
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root = root if root is not None else cache_dir(CACHE_NAMESPACE)
        self.root.mkdir(parents=True, exist_ok=True)
        self.metadata_path = self.root / _CACHE_FILENAME
        self._lock = Lock()
        self._entries: dict[str, Any] = _load_entries(self.metadata_path)

    def read(self, key: str) -> CacheEntry | None:
        with self._lock:
            payload = self._entries.get(key)
            if payload is None:
                self._entries = _load_entries(self.metadata_path)
                payload = self._entries.get(key)
        if not isinstance(payload, dict):
            return None
        try:
            return CacheEntry.from_dict(payload)
        except ValueError:
            _log.debug("discarding unreadable cache entry %s", key)
            return None

    def write(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            entries = _load_entries(self.metadata_path)
            entries[key] = entry.to_dict()
            self._entries = entries
            self._flush()

    def clear(self) -> list[Path]:
        """Delete the metadata file and return the removed paths."""
        with self._lock:
            self._entries = {}
            try:
                self.metadata_path.unlink()
            except FileNotFoundError:
                return []
        return [self.metadata_path]

    def _flush(self) -> None:
        payload = {"version": _CACHE_VERSION, "entries": self._entries}
        tmp_path = self.metadata_path.with_suffix(f".{os.getpid()}.tmp")
        try:
            tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
            tmp_path.replace(self.metadata_path)
        except OSError as exc:
            _log.warning("unable to persist MathML cache to %s: %s", self.metadata_path, exc)


def _load_entries(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if not isinstance(payload, dict) or payload.get("version") != _CACHE_VERSION:
        return {}
    entries = payload.get("entries")
    return entries if isinstance(entries, dict) else {}


__all__ = [
    "CACHE_NAMESPACE",
    "CacheEntry",
    "DiskMathCache",
    "MathCache",
    "MemoryMathCache",
    "fingerprint",
]
