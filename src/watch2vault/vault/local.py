"""Filesystem-backed vault store."""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Optional

from ..exceptions import StorageError
from ..utils import normalize_path
from .base import VaultFile, VaultStore


class LocalVault(VaultStore):
    """Vault store that maps vault paths onto a directory on disk.

    Disk I/O runs in a worker thread so the event loop is free while a note
    is being written.
    """

    def __init__(self, vault_path: Path):
        self._root = Path(vault_path)

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        """Map a vault path to a filesystem path inside the vault directory."""
        normalized = normalize_path(path)
        if normalized == "/":
            return self._root
        if ".." in normalized.split("/"):
            raise StorageError(f"Path escapes the vault: {path}")
        return self._root / normalized

    async def exists(self, path: str) -> bool:
        return await asyncio.to_thread(self.resolve(path).exists)

    async def create_folder(self, path: str) -> None:
        target = self.resolve(path)
        try:
            await asyncio.to_thread(target.mkdir, parents=True, exist_ok=False)
        except FileExistsError as e:
            raise StorageError(f"Folder already exists: {path}") from e
        except OSError as e:
            raise StorageError(f"Failed to create folder {path}: {e}") from e

    async def create(self, path: str, content: str) -> VaultFile:
        target = self.resolve(path)
        try:
            await asyncio.to_thread(_write_new, target, content)
        except FileExistsError as e:
            raise StorageError(f"File already exists: {path}") from e
        except OSError as e:
            raise StorageError(f"Failed to create {path}: {e}") from e
        return VaultFile(path=normalize_path(path))

    async def get_by_path(self, path: str) -> Optional[VaultFile]:
        target = self.resolve(path)
        if await asyncio.to_thread(target.is_file):
            return VaultFile(path=normalize_path(path))
        return None

    async def modify(self, file: VaultFile, content: str) -> None:
        target = self.resolve(file.path)
        try:
            await asyncio.to_thread(_write_replace, target, content)
        except OSError as e:
            raise StorageError(f"Failed to write {file.path}: {e}") from e


def _write_new(target: Path, content: str) -> None:
    with target.open("x", encoding="utf-8", newline="") as fh:
        fh.write(content)


def _write_replace(target: Path, content: str) -> None:
    """Write content to a sibling temp file, then swap it into place."""
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
