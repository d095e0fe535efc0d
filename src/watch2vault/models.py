"""Data models for watch2vault."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class FeedEntry:
    """One watchlist item parsed from the feed."""

    title: str = ""
    link: str = ""
    pub_date: str = ""
    description: str = ""
    category: str = ""
    poster: str = ""
    keywords: str = ""
    rating: str = ""
    guid: str = ""
    year: float = math.nan  # NaN when pub_date has no parseable year


@dataclass
class FeedPage:
    """Entries of a single feed page and the link to the page after it."""

    entries: list[FeedEntry] = field(default_factory=list)
    next_page_url: Optional[str] = None


@dataclass(frozen=True)
class SyncTarget:
    """Resolved vault location for an entry's note."""

    folder: str
    file_path: str


@dataclass
class SyncReport:
    """Outcome of synchronizing one batch of entries into the vault."""

    created: int = 0
    updated: int = 0
    index_written: bool = False
    error: Optional[str] = None

    @property
    def written(self) -> int:
        return self.created + self.updated


@dataclass
class SyncRun:
    """State of one top-level sync run across all feed pages."""

    start_url: str
    entries: list[FeedEntry] = field(default_factory=list)
    next_page_url: Optional[str] = None
    pages: int = 0
    notes_written: int = 0
    errors: list[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return not self.errors
