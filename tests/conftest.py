"""Shared pytest fixtures for the watch2vault test suite."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import structlog

from watch2vault.exceptions import StorageError
from watch2vault.vault import LocalVault, VaultFile, VaultStore

# ---------------------------------------------------------------------------
# Feed markup helpers
# ---------------------------------------------------------------------------


def make_item(
    title: str,
    category: str = "movie",
    pub_date: str = "Fri, 05 Jan 2024 10:00:00 +0000",
    guid: str | None = None,
) -> str:
    """Return one RSS ``<item>`` in the shape of a Plex watchlist feed."""
    return (
        "<item>"
        f"<title>{title}</title>"
        f"<link>https://watch.plex.tv/{title.lower().replace(' ', '-')}</link>"
        f"<pubDate>{pub_date}</pubDate>"
        f"<description>About {title}</description>"
        f"<category>{category}</category>"
        f'<media:thumbnail url="https://img.example.com/{guid or title}.jpg"/>'
        "<media:keywords>drama</media:keywords>"
        "<media:rating>PG-13</media:rating>"
        f"<guid>{guid or 'plex://' + title}</guid>"
        "</item>"
    )


def make_feed(items: list[str], next_url: str | None = None) -> str:
    """Wrap items in an RSS channel, optionally with a ``rel="next"`` link."""
    next_link = (
        f'<atom:link rel="next" href="{next_url}" type="application/rss+xml"/>'
        if next_url
        else ""
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom" '
        'xmlns:media="http://search.yahoo.com/mrss/">'
        "<channel><title>Watchlist</title>"
        f"{next_link}"
        f"{''.join(items)}"
        "</channel></rss>"
    )


@pytest.fixture()
def item() -> Callable[..., str]:
    return make_item


@pytest.fixture()
def feed() -> Callable[..., str]:
    return make_feed


# ---------------------------------------------------------------------------
# HTTP stubs
# ---------------------------------------------------------------------------


class FeedServer:
    """Serves canned responses per URL through httpx.MockTransport."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.requests: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return httpx.Response(route.status_code, content=route.content)
        if isinstance(route, bytes):
            return httpx.Response(200, content=route)
        return httpx.Response(200, text=route)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture()
def feed_server() -> Callable[[dict[str, Any]], FeedServer]:
    """Factory for a FeedServer over the given routes."""
    return FeedServer


# ---------------------------------------------------------------------------
# Vault fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def vault(tmp_path: Path) -> LocalVault:
    """LocalVault rooted at a fresh temporary directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return LocalVault(root)


class MemoryVault(VaultStore):
    """In-memory vault that can be told to fail on specific paths."""

    def __init__(self) -> None:
        self.folders: set[str] = set()
        self.files: dict[str, str] = {}
        self.fail_on: set[str] = set()
        self.writes: list[str] = []

    def _check(self, path: str) -> None:
        if path in self.fail_on:
            raise StorageError(f"disk full: {path}")

    async def exists(self, path: str) -> bool:
        return path in self.folders or path in self.files

    async def create_folder(self, path: str) -> None:
        self._check(path)
        if path in self.folders:
            raise StorageError(f"Folder already exists: {path}")
        self.folders.add(path)

    async def create(self, path: str, content: str) -> VaultFile:
        self._check(path)
        if path in self.files:
            raise StorageError(f"File already exists: {path}")
        self.files[path] = content
        self.writes.append(path)
        return VaultFile(path=path)

    async def get_by_path(self, path: str) -> VaultFile | None:
        return VaultFile(path=path) if path in self.files else None

    async def modify(self, file: VaultFile, content: str) -> None:
        self._check(file.path)
        self.files[file.path] = content
        self.writes.append(file.path)


@pytest.fixture()
def memory_vault() -> MemoryVault:
    return MemoryVault()


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _restore_logging():
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
