from __future__ import annotations

from pathlib import Path

from fakes import MATHML, FakeClient, envelope
import pytest
import typer
from typer.testing import CliRunner

from texmathml.core import renderer as renderer_module
from texmathml.core.exceptions import ConversionTimeoutError
from texmathml.ui.cli import app
from texmathml.ui.cli.commands.render import build_config, encode_cli_settings


runner = CliRunner()


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch) -> FakeClient:
    client = FakeClient()

    def factory(**_kwargs: object) -> FakeClient:
        return client

    monkeypatch.setattr(renderer_module, "RequestsConversionClient", factory)
    return client


def test_render_prints_embedded_fragment(fake_client: FakeClient) -> None:
    fake_client.responses.append(envelope(MATHML))

    result = runner.invoke(
        app,
        ["render", "x^2", "--url", "http://latexml.test", "--no-cache", "--tag-id", "eq-7"],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == f'<span class="tex" dir="ltr" id="eq-7">{MATHML}</span>'
    host, body, _ = fake_client.calls[0]
    assert host == "http://latexml.test"
    assert body.endswith("&tex=x%5E2")


def test_render_links_labels_to_existing_pages(fake_client: FakeClient) -> None:
    result = runner.invoke(
        app,
        [
            "render",
            "E=mc^2",
            "--no-cache",
            "--label",
            "energy",
            "--existing-page",
            "Formula:energy",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith(
        '<a title="Formula:energy" href="/index.php?title=Formula:energy">'
    )


def test_render_raw_outputs_mathml(fake_client: FakeClient) -> None:
    result = runner.invoke(app, ["render", "x^2", "--no-cache", "--raw", "--setting", "pmml"])

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == MATHML
    assert fake_client.calls[0][1] == "pmml&tex=x%5E2"


def test_render_verbose_reports_render_events(fake_client: FakeClient) -> None:
    result = runner.invoke(app, ["render", "x^2", "--no-cache", "--raw", "-v"])

    assert result.exit_code == 0, result.output
    assert "Rendered MathML" in result.output


def test_render_failure_exits_with_error(fake_client: FakeClient) -> None:
    fake_client.responses.append(ConversionTimeoutError("http://latexml.test"))

    result = runner.invoke(app, ["render", "x^2", "--url", "http://latexml.test", "--no-cache"])

    assert result.exit_code == 1
    assert "<math" not in result.stdout


def test_render_uses_disk_cache(fake_client: FakeClient, tmp_path: Path) -> None:
    args = ["render", "x^2", "--cache-dir", str(tmp_path / "mathml"), "--raw"]

    first = runner.invoke(app, args)
    second = runner.invoke(app, args)

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert second.stdout == first.stdout
    assert len(fake_client.calls) == 1
    assert (tmp_path / "mathml" / "metadata.json").exists()


def test_render_rejects_invalid_configuration(fake_client: FakeClient) -> None:
    result = runner.invoke(app, ["render", "x", "--timeout", "0", "--no-cache"])

    assert result.exit_code == 2
    assert fake_client.calls == []


def test_clear_cache_removes_default_metadata(isolated_cache_root: Path) -> None:
    metadata = isolated_cache_root / "mathml" / "metadata.json"
    metadata.parent.mkdir(parents=True)
    metadata.write_text("{}", encoding="utf-8")

    result = runner.invoke(app, ["clear-cache"])

    assert result.exit_code == 0, result.output
    assert "Removed" in result.stdout
    assert not metadata.exists()


def test_clear_cache_honours_cache_dir(fake_client: FakeClient, tmp_path: Path) -> None:
    store = tmp_path / "store"
    rendered = runner.invoke(app, ["render", "x^2", "--cache-dir", str(store), "--raw"])
    assert rendered.exit_code == 0, rendered.output

    result = runner.invoke(app, ["clear-cache", "--cache-dir", str(store)])

    assert result.exit_code == 0, result.output
    assert str(store / "metadata.json") in result.stdout
    assert not (store / "metadata.json").exists()
    assert store.is_dir()

    again = runner.invoke(app, ["clear-cache", "--cache-dir", str(store)])
    assert "Cache already empty." in again.stdout


def test_encode_cli_settings() -> None:
    assert encode_cli_settings(None) is None
    assert encode_cli_settings(["pmml", "preload=[ids]latexml.sty", "format=xhtml"]) == (
        "pmml&preload=%5Bids%5Dlatexml.sty&format=xhtml"
    )
    with pytest.raises(typer.BadParameter):
        encode_cli_settings(["=value"])


def test_build_config_merges_overrides(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("daemon_urls: http://file.test\ntimeout: 12\n", encoding="utf-8")

    config = build_config(path, ["http://a.test", "http://b.test"], None)

    assert config.daemon_urls == ["http://a.test", "http://b.test"]
    assert config.timeout == 12
