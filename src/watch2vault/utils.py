"""Utility functions for watch2vault."""

import math
import re
import unicodedata
from datetime import datetime
from email.utils import parsedate_to_datetime

from .models import FeedEntry, SyncTarget

MOVIE = "movie"
SERIES = "series"

MOVIES_FOLDER = "movies"
SHOWS_FOLDER = "shows"

_UNSAFE_CHARS = re.compile(r'[/\\?<>:*|"]')


def sanitize_title(title: str) -> str:
    """Replace characters that are invalid in vault file names with underscores."""
    return _UNSAFE_CHARS.sub("_", title)


def normalize_path(path: str) -> str:
    """Normalize a vault path the way Obsidian does.

    Collapses backslashes and repeated slashes, strips leading and trailing
    slashes, swaps non-breaking spaces for regular ones and applies NFC.
    An empty path normalizes to the vault root, ``/``.
    """
    path = re.sub(r"[\\/]+", "/", path)
    path = path.strip("/")
    if not path:
        path = "/"
    path = path.replace("\u00a0", " ").replace("\u202f", " ")
    return unicodedata.normalize("NFC", path)


def join_path(*parts: str) -> str:
    """Join vault path segments with ``/`` and normalize the result."""
    return normalize_path("/".join(parts))


def classify_entry(entry: FeedEntry) -> str:
    """Return ``"movie"`` for movie entries and ``"series"`` for everything else."""
    if entry.category.lower() == MOVIE:
        return MOVIE
    return SERIES


def folder_for(kind: str, root_path: str) -> str:
    """Vault folder that holds notes of the given kind."""
    name = MOVIES_FOLDER if kind == MOVIE else SHOWS_FOLDER
    return join_path(root_path, name)


def resolve_target(entry: FeedEntry, root_path: str) -> SyncTarget:
    """Compute the folder and note path for an entry."""
    folder = folder_for(classify_entry(entry), root_path)
    file_path = join_path(folder, sanitize_title(entry.title) + ".md")
    return SyncTarget(folder=folder, file_path=file_path)


def extract_year(pub_date: str) -> float:
    """Extract the calendar year from a feed date.

    Accepts RFC 822 dates (the RSS ``pubDate`` format) and ISO 8601 dates
    only. Bare years ("2021") and long-form dates ("March 5, 2021") are not
    recognized. Returns NaN when the text is not a recognizable date.
    """
    text = pub_date.strip()
    if not text:
        return math.nan
    try:
        return float(parsedate_to_datetime(text).year)
    except (TypeError, ValueError, IndexError):
        pass
    try:
        return float(datetime.fromisoformat(text.replace("Z", "+00:00")).year)
    except ValueError:
        return math.nan
