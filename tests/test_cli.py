"""Tests for the command line interface."""

import importlib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import StubResolver
from favicon_api.cli.app import app
from favicon_api.core.config import get_settings
from favicon_api.orchestration import FaviconService

runner = CliRunner()
cli_module = importlib.import_module("favicon_api.cli.app")


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, default_icon: Path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("HASH_KEY", raising=False)
    monkeypatch.setenv("CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("DEFAULT_ICON_PATH", str(default_icon))
    monkeypatch.setenv("ENV_FILE", str(tmp_path / ".env"))
    monkeypatch.setenv("LOG_FORMAT", "text")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def stub_services(monkeypatch: pytest.MonkeyPatch, png_bytes: bytes) -> list:
    """Replace service construction with one backed by a stub resolver."""
    created = []

    def fake_create_service(settings):
        service = FaviconService(settings, resolver=StubResolver(png_bytes, "html"))
        created.append(service)
        return service

    monkeypatch.setattr(cli_module, "create_service", fake_create_service)
    return created


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "favicon-api version" in result.stdout


def test_rotate_key_replaces_default(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("HASH_KEY=idev\n")

    result = runner.invoke(app, ["rotate-key"])

    assert result.exit_code == 0
    assert "rotated" in result.stdout
    content = (tmp_path / ".env").read_text()
    assert "HASH_KEY=idev" not in content
    assert "HASH_KEY=" in content

    get_settings.cache_clear()
    assert not get_settings().has_insecure_hash_key()


def test_rotate_key_refuses_environment_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HASH_KEY", "idev")
    get_settings.cache_clear()

    result = runner.invoke(app, ["rotate-key"])

    assert result.exit_code == 1
    assert "HASH_KEY" in result.stdout
    assert not (tmp_path / ".env").exists()


def test_rotate_key_keeps_custom(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HASH_KEY", "custom-key")
    get_settings.cache_clear()

    result = runner.invoke(app, ["rotate-key"])

    assert result.exit_code == 0
    assert "nothing to do" in result.stdout


def test_cache_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HASH_KEY", "custom-key")
    get_settings.cache_clear()

    result = runner.invoke(app, ["cache-path", "https://Example.com/page"])

    assert result.exit_code == 0
    assert "example.com_" in result.stdout


def test_cache_path_invalid_url() -> None:
    result = runner.invoke(app, ["cache-path", "://bad"])
    assert result.exit_code == 1


def test_fetch_writes_output(tmp_path: Path, stub_services: list, png_bytes: bytes) -> None:
    output = tmp_path / "icon.png"

    result = runner.invoke(app, ["fetch", "https://Example.com/page", "-o", str(output)])

    assert result.exit_code == 0
    assert "http://example.com" not in result.stdout
    assert "https://example.com" in result.stdout
    assert "html" in result.stdout
    assert output.read_bytes() == png_bytes
    assert stub_services[0].settings.expire_seconds > 0
    assert list((tmp_path / "cache").iterdir())


def test_fetch_no_cache(tmp_path: Path, stub_services: list) -> None:
    result = runner.invoke(app, ["fetch", "example.com", "--no-cache"])

    assert result.exit_code == 0
    assert stub_services[0].settings.expire_seconds == 0
    assert not (tmp_path / "cache").exists()


def test_fetch_refresh_resolves_again(stub_services: list) -> None:
    runner.invoke(app, ["fetch", "example.com"])
    result = runner.invoke(app, ["fetch", "example.com", "--refresh"])

    assert result.exit_code == 0
    assert stub_services[1].resolver.calls == 1
    assert "html" in result.stdout


def test_fetch_invalid_url(stub_services: list) -> None:
    result = runner.invoke(app, ["fetch", "://bad"])

    assert result.exit_code == 1
    assert "Error" in result.stdout
    assert stub_services == []
