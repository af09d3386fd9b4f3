from __future__ import annotations

from pathlib import Path

import pytest

from texmathml.core.cache import DiskMathCache
from texmathml.core.paths import cache_dir, cache_root


def test_explicit_cache_dir_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TEXMATHML_CACHE_DIR", str(tmp_path / "explicit"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))

    assert cache_root() == tmp_path / "explicit"
    assert DiskMathCache().root == tmp_path / "explicit" / "mathml"


def test_xdg_cache_home_is_honoured(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("TEXMATHML_CACHE_DIR", raising=False)
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))

    assert cache_root() == tmp_path / "xdg" / "texmathml"


def test_home_fallback(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("TEXMATHML_CACHE_DIR", raising=False)
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    assert cache_root() == tmp_path / "home" / ".cache" / "texmathml"


def test_cache_dir_creates_on_request(tmp_path: Path) -> None:
    created = cache_dir("mathml")

    assert created == tmp_path / "cache" / "mathml"
    assert created.is_dir()
    assert not cache_dir("other", create=False).exists()
