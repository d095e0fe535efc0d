"""Paginated feed fetching over httpx."""

import asyncio
from typing import AsyncIterator, Optional
from urllib.parse import urljoin

import httpx
import structlog

from .config import Config
from .exceptions import NetworkError, ParseError
from .models import FeedEntry, FeedPage
from .parser import parse_page

logger = structlog.get_logger(__name__)


class _Transient(Exception):
    """A failure worth retrying; wraps the NetworkError to raise if retries run out."""

    def __init__(self, error: NetworkError):
        super().__init__(str(error))
        self.error = error


async def _retry(func, max_attempts: int = 3, base_delay: float = 2.0):
    """Await func with exponential backoff retry on transient failures."""
    last_error = None
    for attempt in range(max_attempts):
        try:
            return await func()
        except _Transient as e:
            last_error = e.error
            if attempt < max_attempts - 1:
                delay = base_delay * (2 ** attempt)
                logger.warning(
                    "feed_fetch_retry", attempt=attempt + 1, delay=delay, error=str(e)
                )
                await asyncio.sleep(delay)
    raise last_error


class FeedFetcher:
    """Fetches feed pages and follows their ``rel="next"`` links."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        max_pages: int = 100,
        max_attempts: int = 3,
        base_delay: float = 2.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(follow_redirects=True)
        self._timeout = timeout
        self.max_pages = max_pages
        self._max_attempts = max_attempts
        self._base_delay = base_delay

    @classmethod
    def from_config(
        cls, config: Config, client: Optional[httpx.AsyncClient] = None
    ) -> "FeedFetcher":
        return cls(
            client=client,
            timeout=config.timeout,
            max_pages=config.max_pages,
            max_attempts=config.max_attempts,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "FeedFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def fetch_page(self, url: str) -> bytes:
        """GET a single feed page and return its raw body.

        The body is left undecoded so the parser can honour the encoding
        declared in the XML prolog.

        Raises:
            NetworkError: On transport failure or a non-2xx response, once
                retries for transient failures are exhausted.
        """
        return await _retry(
            lambda: self._get(url),
            max_attempts=self._max_attempts,
            base_delay=self._base_delay,
        )

    async def _get(self, url: str) -> bytes:
        try:
            response = await self._client.get(url, timeout=self._timeout)
        except httpx.TransportError as e:
            raise _Transient(NetworkError(f"Failed to fetch {url}: {e}")) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f"Failed to fetch {url}: {e}") from e

        if response.is_success:
            return response.content

        error = NetworkError(f"Feed returned HTTP {response.status_code} for {url}")
        if response.status_code == 429 or response.status_code >= 500:
            raise _Transient(error)
        raise error

    async def iter_pages(self, start_url: str) -> AsyncIterator[FeedPage]:
        """Yield parsed pages starting at start_url, in feed order.

        The next page is only requested once the caller asks for it, so a
        consumer can finish with one page before the following one is
        fetched. Stops after ``max_pages`` pages or when a next link points
        back to a page already visited.

        Raises:
            NetworkError: If a page cannot be fetched.
            ParseError: If a page is not well-formed XML or its next link is
                not a valid URL.
        """
        url: Optional[str] = start_url
        visited: set[str] = set()

        while url:
            if len(visited) >= self.max_pages:
                logger.warning("feed_page_cap_reached", max_pages=self.max_pages, next_url=url)
                return
            visited.add(url)

            logger.info("feed_page_fetch", url=url, page=len(visited))
            page = parse_page(await self.fetch_page(url))
            logger.info(
                "feed_page_parsed",
                url=url,
                entries=len(page.entries),
                next_url=page.next_page_url,
            )
            yield page

            url = _next_url(url, page.next_page_url)
            if url and url in visited:
                logger.warning("feed_page_cycle", url=url)
                return

    async def fetch_all(self, start_url: str) -> list[FeedEntry]:
        """Fetch every page and return all entries in feed order."""
        entries: list[FeedEntry] = []
        async for page in self.iter_pages(start_url):
            entries.extend(page.entries)
        return entries


def _next_url(current: str, href: Optional[str]) -> Optional[str]:
    """Resolve a next link against the page it came from."""
    if not href:
        return None
    try:
        return urljoin(current, href)
    except ValueError as e:
        raise ParseError(f"Invalid next link {href!r}: {e}") from e
