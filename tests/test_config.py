from pathlib import Path
import textwrap

import pytest

from texmathml.core.config import (
    DEFAULT_LATEXML_SETTINGS,
    RenderConfig,
    load_config,
)
from texmathml.core.exceptions import ConfigurationError
from texmathml.core.settings import serialize_settings


def test_render_config_defaults() -> None:
    config = RenderConfig()

    assert config.default_settings == DEFAULT_LATEXML_SETTINGS
    assert config.timeout == 240
    assert config.script_path == ""


def test_default_settings_round_trip_unchanged() -> None:
    assert serialize_settings(DEFAULT_LATEXML_SETTINGS) == DEFAULT_LATEXML_SETTINGS
    assert "%5B0%5D" not in DEFAULT_LATEXML_SETTINGS


@pytest.mark.parametrize(
    "data",
    [
        {"daemon_urls": []},
        {"daemon_urls": ["http://a.test", "  "]},
        {"daemon_urls": ""},
        {"timeout": 0},
        {"unknown": True},
    ],
)
def test_render_config_rejects_invalid_values(data: dict) -> None:
    with pytest.raises(ConfigurationError):
        RenderConfig.from_mapping(data)


def test_render_config_accepts_mapping_settings() -> None:
    config = RenderConfig.from_mapping(
        {
            "daemon_urls": ["http://a.test", "http://b.test"],
            "default_settings": {"format": "xhtml", "preload": ["amsmath.sty"]},
            "script_path": "/w/",
        }
    )

    assert config.daemon_urls == ["http://a.test", "http://b.test"]
    assert serialize_settings(config.default_settings) == "format=xhtml&preload=amsmath.sty"
    assert config.script_path == "/w"


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "texmathml.yml"
    path.write_text(
        textwrap.dedent(
            """
            daemon_urls:
              - http://latexml-1.test:8080
              - http://latexml-2.test:8080
            timeout: 30
            default_settings:
              format: xhtml
              preload:
                - amsmath.sty
                - amsthm.sty
            """
        ),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.timeout == 30
    assert len(config.daemon_urls) == 2
    assert serialize_settings(config.default_settings) == (
        "format=xhtml&preload=amsmath.sty&preload=amsthm.sty"
    )


def test_load_config_reports_bad_yaml(tmp_path: Path) -> None:
    path = tmp_path / "broken.yml"
    path.write_text("daemon_urls: [unterminated", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path)


def test_load_config_requires_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yml"
    path.write_text("- http://a.test\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path)


def test_load_config_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "absent.yml")
