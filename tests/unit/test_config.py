"""Unit tests for watch2vault.config."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from watch2vault.config import Config, load_config
from watch2vault.exceptions import ConfigError

_ENV_VARS = [
    "WATCHLIST_FEED_URL",
    "WATCHLIST_FOLDER",
    "OBSIDIAN_VAULT_PATH",
    "WATCHLIST_SYNC_INTERVAL",
    "WATCHLIST_TIMEOUT",
    "WATCHLIST_MAX_PAGES",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config()
        assert config.feed_url == ""
        assert config.folder_path == ""
        assert config.vault_path == tmp_path / "vault_output"
        assert config.sync_interval == 3600
        assert config.timeout == 30
        assert config.max_pages == 100
        assert config.is_configured is False

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WATCHLIST_FEED_URL", "https://rss.example.com/feed")
        monkeypatch.setenv("WATCHLIST_FOLDER", "plex")
        monkeypatch.setenv("OBSIDIAN_VAULT_PATH", "/vaults/main")
        monkeypatch.setenv("WATCHLIST_SYNC_INTERVAL", "600")
        monkeypatch.setenv("WATCHLIST_MAX_PAGES", "5")

        config = load_config()

        assert config.feed_url == "https://rss.example.com/feed"
        assert config.folder_path == "plex"
        assert config.vault_path == Path("/vaults/main")
        assert config.sync_interval == 600
        assert config.max_pages == 5
        assert config.is_configured is True

    def test_cli_overrides_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WATCHLIST_FEED_URL", "https://rss.example.com/env")
        monkeypatch.setenv("WATCHLIST_MAX_PAGES", "5")

        config = load_config(feed_url="https://rss.example.com/cli", max_pages=2)

        assert config.feed_url == "https://rss.example.com/cli"
        assert config.max_pages == 2

    def test_verbose_forces_debug(self) -> None:
        assert load_config(verbose=True).log_level == "DEBUG"

    def test_non_numeric_env_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WATCHLIST_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="WATCHLIST_TIMEOUT"):
            load_config()


class TestValidate:
    @pytest.mark.parametrize(
        "overrides",
        [
            {"sync_interval": 0},
            {"timeout": -1},
            {"max_pages": 0},
            {"max_attempts": 0},
            {"log_format": "xml"},
            {"feed_url": "ftp://example.com/feed"},
        ],
    )
    def test_invalid_values(self, overrides: dict) -> None:
        with pytest.raises(ConfigError):
            Config(**overrides).validate()

    def test_valid(self) -> None:
        Config(feed_url="https://rss.example.com/feed", folder_path="plex").validate()


class TestConfig:
    def test_is_immutable(self) -> None:
        config = Config(feed_url="https://rss.example.com/feed")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.feed_url = "https://other.example.com"  # type: ignore[misc]

    def test_blank_values_are_not_configured(self) -> None:
        assert Config(feed_url="   ", folder_path="plex").is_configured is False
        assert Config(feed_url="https://x", folder_path=" ").is_configured is False
