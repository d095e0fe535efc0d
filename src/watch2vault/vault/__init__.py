"""Vault store factory."""

from ..config import Config
from .base import VaultFile, VaultStore
from .local import LocalVault

__all__ = ["LocalVault", "VaultFile", "VaultStore", "get_vault"]


def get_vault(config: Config) -> VaultStore:
    """Create the vault store for the configured vault directory."""
    return LocalVault(config.vault_path)
