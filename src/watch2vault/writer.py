"""Write feed entries to the vault as notes."""

import structlog

from .exceptions import StorageError
from .formatter import format_entry_note, format_watch_index
from .models import FeedEntry, SyncReport
from .utils import MOVIE, SERIES, folder_for, join_path, resolve_target
from .vault import VaultStore

logger = structlog.get_logger(__name__)

WATCH_FILE = "watch.md"


async def sync_entries(
    entries: list[FeedEntry], root_path: str, vault: VaultStore
) -> SyncReport:
    """Write one note per entry under root_path, then regenerate watch.md.

    Entries are written in order, so when two titles sanitize to the same
    file name the later entry wins. Storage failures are logged and recorded
    on the returned report instead of being raised; notes written before the
    failure stay in place.
    """
    report = SyncReport()
    try:
        await ensure_folder(vault, folder_for(MOVIE, root_path))
        await ensure_folder(vault, folder_for(SERIES, root_path))

        for entry in entries:
            created = await write_entry(vault, entry, root_path)
            if created:
                report.created += 1
            else:
                report.updated += 1

        await write_watch_index(vault, root_path)
        report.index_written = True
    except (StorageError, OSError) as e:
        report.error = str(e)
        logger.error(
            "vault_sync_failed",
            root=root_path,
            written=report.written,
            error=str(e),
        )
        return report

    logger.info(
        "vault_sync_complete",
        root=root_path,
        created=report.created,
        updated=report.updated,
    )
    return report


async def ensure_folder(vault: VaultStore, path: str) -> None:
    """Create path unless it exists. Losing a creation race is not an error."""
    if await vault.exists(path):
        return
    try:
        await vault.create_folder(path)
    except StorageError:
        if not await vault.exists(path):
            raise
        logger.debug("vault_folder_already_created", path=path)


async def write_entry(vault: VaultStore, entry: FeedEntry, root_path: str) -> bool:
    """Create or overwrite the note for entry. Returns True if it was created."""
    target = resolve_target(entry, root_path)
    content = format_entry_note(entry)
    return await _put(vault, target.file_path, content)


async def write_watch_index(vault: VaultStore, root_path: str) -> None:
    """Overwrite root_path/watch.md with the index template."""
    await _put(vault, join_path(root_path, WATCH_FILE), format_watch_index(root_path))


async def _put(vault: VaultStore, path: str, content: str) -> bool:
    file = await vault.get_by_path(path)
    if file is None:
        await vault.create(path, content)
        logger.debug("vault_note_created", path=path)
        return True
    await vault.modify(file, content)
    logger.debug("vault_note_updated", path=path)
    return False
