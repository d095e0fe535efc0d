"""YAML frontmatter and Obsidian markdown formatting."""

import math

from .models import FeedEntry
from .utils import MOVIES_FOLDER, join_path

WATCH_CSS_CLASSES = "cards, cards-cover, cards-2-3, table-max"


def format_year(year: float) -> str:
    """Render a year as an integer, or ``NaN`` when it could not be parsed."""
    if math.isnan(year):
        return "NaN"
    return str(int(year))


def format_entry_note(entry: FeedEntry) -> str:
    """Generate the frontmatter-only note for a feed entry."""
    lines = [
        "---",
        f"title: \"{_escape_yaml(entry.title)}\"",
        f"link: \"{_escape_yaml(entry.link)}\"",
        f"pubDate: \"{_escape_yaml(entry.pub_date)}\"",
        f"description: \"{_escape_yaml(entry.description)}\"",
        f"category: \"{_escape_yaml(entry.category)}\"",
        f"poster: \"{_escape_yaml(entry.poster)}\"",
        f"keywords: \"{_escape_yaml(entry.keywords)}\"",
        f"rating: \"{_escape_yaml(entry.rating)}\"",
        f"guid: \"{_escape_yaml(entry.guid)}\"",
        f"year: {format_year(entry.year)}",
        "---",
    ]
    return "\n".join(lines) + "\n"


def format_watch_index(root_path: str) -> str:
    """Render the watch.md index: a Dataview card table over the movies folder."""
    movies_folder = join_path(root_path, MOVIES_FOLDER)
    lines = [
        "---",
        f"cssclasses: {WATCH_CSS_CLASSES}",
        "---",
        "",
        "```dataview",
        "table without id",
        "\t(\"![](\" + poster + \")\") as Poster,",
        "\tfile.link as Title,",
        "\tstring(year) as Year,",
        "\tpubDate as \"Date Added\"",
        f"from \"{movies_folder}\"",
        "sort pubDate desc, title asc",
        "```",
    ]
    return "\n".join(lines) + "\n"


def _escape_yaml(text: str) -> str:
    """Escape special characters for YAML string values."""
    text = text.replace("\\", "\\\\")
    text = text.replace('"', '\\"')
    text = text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return text
