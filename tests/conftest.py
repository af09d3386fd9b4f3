from __future__ import annotations

from pathlib import Path

from fakes import SpyCache
import pytest

from texmathml.core.config import RenderConfig


@pytest.fixture
def config() -> RenderConfig:
    return RenderConfig(daemon_urls="http://latexml.test:8080", timeout=5)


@pytest.fixture
def cache() -> SpyCache:
    return SpyCache()


@pytest.fixture(autouse=True)
def isolated_cache_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    root = tmp_path / "cache"
    monkeypatch.setenv("TEXMATHML_CACHE_DIR", str(root))
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    return root
