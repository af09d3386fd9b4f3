from __future__ import annotations

from datetime import datetime, timezone
import json
from pathlib import Path

from fakes import MATHML

from texmathml.core.cache import (
    CACHE_NAMESPACE,
    CacheEntry,
    DiskMathCache,
    MathCache,
    MemoryMathCache,
    fingerprint,
)


def test_fingerprint_depends_on_tex_and_settings() -> None:
    base = fingerprint("x^2", "format=xhtml")

    assert base == fingerprint("x^2", "format=xhtml")
    assert base != fingerprint("x^3", "format=xhtml")
    assert base != fingerprint("x^2", "format=html5")


def test_fingerprint_uses_serialized_settings() -> None:
    assert fingerprint("x", {"preload": ["a.sty", "b.sty"]}) == fingerprint(
        "x", "preload=a.sty&preload=b.sty"
    )


def test_memory_cache_round_trip() -> None:
    cache = MemoryMathCache()
    entry = CacheEntry(tex="x", mathml=MATHML)

    assert cache.read("missing") is None
    cache.write("key", entry)

    assert cache.read("key") is entry
    assert isinstance(cache, MathCache)


def test_disk_cache_persists_entries(tmp_path: Path) -> None:
    stamp = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    first = DiskMathCache(tmp_path / "store")
    first.write("abc", CacheEntry(tex="x", mathml=MATHML, label="eq1", timestamp=stamp))

    second = DiskMathCache(tmp_path / "store")
    entry = second.read("abc")

    assert entry == CacheEntry(tex="x", mathml=MATHML, label="eq1", timestamp=stamp)
    payload = json.loads((tmp_path / "store" / "metadata.json").read_text(encoding="utf-8"))
    assert payload["version"] == 1
    assert set(payload["entries"]) == {"abc"}


def test_disk_cache_ignores_corrupt_metadata(tmp_path: Path) -> None:
    root = tmp_path / "store"
    root.mkdir()
    (root / "metadata.json").write_text("{not json", encoding="utf-8")

    cache = DiskMathCache(root)

    assert cache.read("abc") is None
    cache.write("abc", CacheEntry(tex="x", mathml=MATHML))
    assert DiskMathCache(root).read("abc") is not None


def test_disk_cache_ignores_foreign_versions(tmp_path: Path) -> None:
    root = tmp_path / "store"
    root.mkdir()
    payload = {"version": 99, "entries": {"abc": {"tex": "x", "mathml": MATHML}}}
    (root / "metadata.json").write_text(json.dumps(payload), encoding="utf-8")

    assert DiskMathCache(root).read("abc") is None


def test_disk_cache_defaults_to_cache_root(isolated_cache_root: Path) -> None:
    cache = DiskMathCache()

    assert cache.root == isolated_cache_root / CACHE_NAMESPACE
    assert cache.root.is_dir()


def test_cache_entry_from_dict_tolerates_missing_timestamp() -> None:
    entry = CacheEntry.from_dict({"tex": "x", "mathml": MATHML})

    assert entry.tex == "x"
    assert entry.label is None
    assert entry.timestamp.tzinfo is not None


def test_disk_caches_sharing_a_directory_keep_each_others_keys(tmp_path: Path) -> None:
    root = tmp_path / "shared"
    first = DiskMathCache(root)
    second = DiskMathCache(root)

    first.write("a", CacheEntry(tex="a", mathml=MATHML))
    second.write("b", CacheEntry(tex="b", mathml=MATHML))

    payload = json.loads((root / "metadata.json").read_text(encoding="utf-8"))
    assert set(payload["entries"]) == {"a", "b"}
    assert first.read("b") is not None
    assert list(root.glob("*.tmp")) == []


def test_disk_cache_clear_removes_metadata(tmp_path: Path) -> None:
    cache = DiskMathCache(tmp_path / "store")
    cache.write("abc", CacheEntry(tex="x", mathml=MATHML))

    assert cache.clear() == [tmp_path / "store" / "metadata.json"]
    assert cache.read("abc") is None
    assert cache.clear() == []
