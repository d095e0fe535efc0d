"""Custom exceptions for watch2vault."""


class Watch2VaultError(Exception):
    """Base exception for watch2vault."""


class ConfigError(Watch2VaultError):
    """Raised when configuration is missing or invalid."""


class NetworkError(Watch2VaultError):
    """Raised when a feed page cannot be fetched or returns a non-success status."""


class ParseError(Watch2VaultError):
    """Raised when feed markup cannot be parsed as an XML document."""


class StorageError(Watch2VaultError):
    """Raised when a vault folder or file operation fails."""
