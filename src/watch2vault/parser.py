"""RSS page parsing into feed entries."""

import xml.etree.ElementTree as ET
from typing import Optional, Union

from .exceptions import ParseError
from .models import FeedEntry, FeedPage
from .utils import extract_year


def parse_page(markup: Union[str, bytes]) -> FeedPage:
    """Parse one page of feed markup.

    Every ``item`` element becomes a FeedEntry, in document order. Elements
    are matched by local name so namespaced tags (``media:thumbnail``,
    ``atom:link``) and bare ones are treated alike.

    Raises:
        ParseError: If the markup is not a well-formed XML document.
    """
    try:
        root = ET.fromstring(markup)
    except ET.ParseError as e:
        raise ParseError(f"Malformed feed markup: {e}") from e

    entries = [
        _entry_from_item(node) for node in root.iter() if _local_name(node.tag) == "item"
    ]
    return FeedPage(entries=entries, next_page_url=_next_page_url(root))


def _entry_from_item(item: ET.Element) -> FeedEntry:
    pub_date = _text(item, "pubDate")
    thumbnail = _find(item, "thumbnail")
    poster = thumbnail.get("url", "") if thumbnail is not None else ""

    return FeedEntry(
        title=_text(item, "title"),
        link=_text(item, "link"),
        pub_date=pub_date,
        description=_text(item, "description"),
        category=_text(item, "category"),
        poster=poster,
        keywords=_text(item, "keywords"),
        rating=_text(item, "rating"),
        guid=_text(item, "guid"),
        year=extract_year(pub_date),
    )


def _next_page_url(root: ET.Element) -> Optional[str]:
    """Return the href of the first ``link rel="next"`` element, if any."""
    for node in root.iter():
        if _local_name(node.tag) != "link" or node.get("rel") != "next":
            continue
        href = node.get("href", "").strip()
        if href:
            return href
    return None


def _find(parent: ET.Element, name: str) -> Optional[ET.Element]:
    """First descendant of parent (excluding itself) with the given local name."""
    for node in parent.iter():
        if node is not parent and _local_name(node.tag) == name:
            return node
    return None


def _text(parent: ET.Element, name: str) -> str:
    node = _find(parent, name)
    if node is None:
        return ""
    return "".join(node.itertext())


def _local_name(tag: str) -> str:
    # ElementTree spells namespaced tags as "{uri}name".
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag
