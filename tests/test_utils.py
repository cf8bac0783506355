"""Tests for configuration loading and path helpers."""

import json
from pathlib import Path

from spendsync.utils import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT,
    get_spendsync_home,
    load_settings,
    resolve_db_path,
)


def write_config(home: Path, data) -> Path:
    home.mkdir(parents=True, exist_ok=True)
    path = home / "config.json"
    path.write_text(json.dumps(data))
    return path


class TestHome:
    def test_env_override(self, isolated_home):
        assert get_spendsync_home() == isolated_home

    def test_default(self, monkeypatch):
        monkeypatch.delenv("SPENDSYNC_HOME")
        assert get_spendsync_home() == Path.home() / ".spendsync"

    def test_resolve_db_path_explicit(self, tmp_path):
        assert resolve_db_path(tmp_path / "x.db") == tmp_path / "x.db"

    def test_resolve_db_path_creates_home(self, isolated_home):
        path = resolve_db_path()
        assert path == isolated_home / "spendsync.db"
        assert isolated_home.is_dir()


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.backend_url is None
        assert settings.has_backend is False
        assert settings.page_size == DEFAULT_PAGE_SIZE
        assert settings.timeout == DEFAULT_TIMEOUT
        assert settings.db_path is None

    def test_config_file(self, isolated_home):
        write_config(
            isolated_home,
            {
                "backend_url": "https://api.example.com/v1/",
                "auth_token": "tok",
                "page_size": 10,
                "timeout": 2.5,
                "db_path": str(isolated_home / "data.db"),
            },
        )
        settings = load_settings()
        assert settings.backend_url == "https://api.example.com/v1"
        assert settings.auth_token == "tok"
        assert settings.page_size == 10
        assert settings.timeout == 2.5
        assert settings.db_path == isolated_home / "data.db"

    def test_env_overrides_config(self, isolated_home, monkeypatch):
        write_config(isolated_home, {"backend_url": "https://a.example.com", "page_size": 10})
        monkeypatch.setenv("SPENDSYNC_BACKEND_URL", "https://b.example.com")
        monkeypatch.setenv("SPENDSYNC_PAGE_SIZE", "3")
        settings = load_settings()
        assert settings.backend_url == "https://b.example.com"
        assert settings.page_size == 3

    def test_invalid_numbers_fall_back(self, monkeypatch):
        monkeypatch.setenv("SPENDSYNC_PAGE_SIZE", "many")
        monkeypatch.setenv("SPENDSYNC_TIMEOUT", "-1")
        settings = load_settings()
        assert settings.page_size == DEFAULT_PAGE_SIZE
        assert settings.timeout == DEFAULT_TIMEOUT

    def test_insecure_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("SPENDSYNC_BACKEND_URL", "http://api.example.com")
        assert load_settings().backend_url is None

    def test_broken_config_ignored(self, isolated_home):
        isolated_home.mkdir(parents=True)
        (isolated_home / "config.json").write_text("{not json")
        assert load_settings().backend_url is None

    def test_non_object_config_ignored(self, isolated_home):
        write_config(isolated_home, ["https://api.example.com"])
        assert load_settings().backend_url is None

    def test_explicit_config_path(self, tmp_path):
        path = write_config(tmp_path / "elsewhere", {"auth_token": "abc"})
        assert load_settings(path).auth_token == "abc"
