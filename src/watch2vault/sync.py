"""One sync run: page through the feed and flush every page to the vault."""

from datetime import datetime
from typing import Optional

import httpx
import structlog

from .config import Config
from .exceptions import NetworkError, ParseError
from .fetcher import FeedFetcher
from .models import SyncRun
from .vault import VaultStore, get_vault
from .writer import sync_entries

logger = structlog.get_logger(__name__)


async def run_sync(
    config: Config,
    start_url: Optional[str] = None,
    vault: Optional[VaultStore] = None,
    fetcher: Optional[FeedFetcher] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> SyncRun:
    """Run one sync against the vault and return what happened.

    Each page is written to the vault before the next page is requested, so
    a failure partway through the feed keeps everything already written.
    Network and parse failures end the run and are recorded on the returned
    SyncRun; they are never raised.
    """
    run = SyncRun(start_url=start_url or config.feed_url)

    if not run.start_url.strip() or not config.folder_path.strip():
        logger.info("sync_skipped_unconfigured")
        run.finished_at = datetime.now()
        return run

    vault = vault or get_vault(config)
    owns_fetcher = fetcher is None
    fetcher = fetcher or FeedFetcher.from_config(config, client=client)
    log = logger.bind(start_url=run.start_url, root=config.folder_path)
    log.info("sync_started")

    try:
        async for page in fetcher.iter_pages(run.start_url):
            run.pages += 1
            run.entries.extend(page.entries)
            run.next_page_url = page.next_page_url

            report = await sync_entries(page.entries, config.folder_path, vault)
            run.notes_written += report.written
            if report.error:
                run.errors.append(report.error)
    except (NetworkError, ParseError) as e:
        run.errors.append(str(e))
        log.error("sync_aborted", page=run.pages + 1, error=str(e))
    finally:
        if owns_fetcher:
            await fetcher.aclose()
        run.finished_at = datetime.now()

    log.info(
        "sync_finished",
        pages=run.pages,
        entries=len(run.entries),
        notes_written=run.notes_written,
        errors=len(run.errors),
    )
    return run
