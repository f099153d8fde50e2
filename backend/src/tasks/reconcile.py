"""
Aggregate reconciliation task.

Stored tag usage counts and cached folder bookmark counts are maintained
incrementally and can drift (e.g. after a failed write midway through a
bookmark mutation). This task recomputes both from the bookmark list and
rewrites the stored values that differ.

Usage:
    python -m tasks.reconcile
"""
import asyncio
import logging
from dataclasses import dataclass, field

from core.config import get_settings
from records.base import RecordClient
from records.factory import create_record_client
from services.bookmark_service import BookmarkService
from services.folder_service import FolderService
from services.tag_service import TagService

logger = logging.getLogger(__name__)


@dataclass
class ReconcileStats:
    """Statistics from a reconciliation run."""

    bookmarks_scanned: int = 0
    tags_created: list[str] = field(default_factory=list)
    tags_updated: list[str] = field(default_factory=list)
    tags_removed: list[str] = field(default_factory=list)
    folders_corrected: list[int] = field(default_factory=list)


async def reconcile(client: RecordClient) -> ReconcileStats:
    """Reconcile tag usage counts and folder bookmark counts against the bookmarks."""
    settings = get_settings()
    tag_service = TagService(client, settings)
    folder_service = FolderService(client, settings)
    bookmark_service = BookmarkService(client, tag_service, folder_service, settings)

    bookmarks = await bookmark_service.load_all()
    tags = await tag_service.reconcile_usage(bookmarks)
    folders = await folder_service.sync_bookmark_counts(bookmarks)

    return ReconcileStats(
        bookmarks_scanned=len(bookmarks),
        tags_created=tags.created,
        tags_updated=tags.updated,
        tags_removed=tags.removed,
        folders_corrected=[folder.id for folder in folders],
    )


async def run_reconcile() -> ReconcileStats:
    """Run reconciliation against the configured record store."""
    logger.info("Starting reconciliation")
    client = create_record_client(get_settings())
    try:
        stats = await reconcile(client)
    finally:
        await client.close()

    logger.info(
        "Reconciliation complete: %d bookmarks scanned, tags %d created / %d updated / "
        "%d removed, %d folder counts corrected",
        stats.bookmarks_scanned,
        len(stats.tags_created),
        len(stats.tags_updated),
        len(stats.tags_removed),
        len(stats.folders_corrected),
    )
    return stats


def main() -> None:
    """Entry point for running reconciliation as a script."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_reconcile())


if __name__ == "__main__":
    main()
