"""Sync a media watchlist RSS feed into an Obsidian vault."""

__version__ = "0.1.0"
