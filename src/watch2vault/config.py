"""Configuration loading and validation."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigError

DEFAULT_SYNC_INTERVAL = 3600.0
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_PAGES = 100


@dataclass(frozen=True)
class Config:
    """Application configuration.

    Instances are immutable; each sync run works from the snapshot it was
    handed when it started.
    """

    feed_url: str = ""
    folder_path: str = ""
    vault_path: Path = field(default_factory=lambda: Path.cwd() / "vault_output")
    sync_interval: float = DEFAULT_SYNC_INTERVAL
    timeout: float = DEFAULT_TIMEOUT
    max_pages: int = DEFAULT_MAX_PAGES
    max_attempts: int = 3
    log_level: str = "INFO"
    log_format: str = "console"
    verbose: bool = False

    @property
    def is_configured(self) -> bool:
        """Both the feed URL and the target folder are set."""
        return bool(self.feed_url.strip() and self.folder_path.strip())

    def validate(self) -> None:
        """Validate configuration values."""
        if self.sync_interval <= 0:
            raise ConfigError("sync_interval must be positive.")
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive.")
        if self.max_pages < 1:
            raise ConfigError("max_pages must be at least 1.")
        if self.max_attempts < 1:
            raise ConfigError("max_attempts must be at least 1.")
        if self.log_format not in ("console", "json"):
            raise ConfigError(
                f"Unknown log format: {self.log_format}. Use 'console' or 'json'."
            )
        feed_url = self.feed_url.strip()
        if feed_url and not feed_url.startswith(("http://", "https://")):
            raise ConfigError(f"Feed URL must be http(s): {feed_url}")


def load_config(
    feed_url: Optional[str] = None,
    folder_path: Optional[str] = None,
    vault_path: Optional[str] = None,
    sync_interval: Optional[float] = None,
    timeout: Optional[float] = None,
    max_pages: Optional[int] = None,
    verbose: bool = False,
) -> Config:
    """Load config from .env and apply CLI overrides."""
    load_dotenv()

    config = Config(
        feed_url=feed_url or os.getenv("WATCHLIST_FEED_URL", ""),
        folder_path=folder_path or os.getenv("WATCHLIST_FOLDER", ""),
        vault_path=Path(vault_path) if vault_path else Path(
            os.getenv("OBSIDIAN_VAULT_PATH", str(Path.cwd() / "vault_output"))
        ),
        sync_interval=sync_interval if sync_interval is not None else _env_number(
            "WATCHLIST_SYNC_INTERVAL", DEFAULT_SYNC_INTERVAL, float
        ),
        timeout=timeout if timeout is not None else _env_number(
            "WATCHLIST_TIMEOUT", DEFAULT_TIMEOUT, float
        ),
        max_pages=max_pages if max_pages is not None else _env_number(
            "WATCHLIST_MAX_PAGES", DEFAULT_MAX_PAGES, int
        ),
        log_level="DEBUG" if verbose else os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "console"),
        verbose=verbose,
    )

    config.validate()
    return config


def _env_number(name: str, default, cast):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}.") from e
