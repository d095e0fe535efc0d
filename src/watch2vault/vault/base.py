"""Abstract base class for vault document stores."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class VaultFile:
    """Handle to a note that exists in the vault."""

    path: str


class VaultStore(ABC):
    """Abstract document store addressed by normalized ``/``-separated paths.

    Implementations raise StorageError when an operation fails.
    """

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Return True if a folder or file exists at path."""

    @abstractmethod
    async def create_folder(self, path: str) -> None:
        """Create a folder (and missing parents). Fails if it already exists."""

    @abstractmethod
    async def create(self, path: str, content: str) -> VaultFile:
        """Create a new note with the given content. Fails if it already exists."""

    @abstractmethod
    async def get_by_path(self, path: str) -> Optional[VaultFile]:
        """Return a handle to the note at path, or None if there is none."""

    @abstractmethod
    async def modify(self, file: VaultFile, content: str) -> None:
        """Replace the full content of an existing note."""
