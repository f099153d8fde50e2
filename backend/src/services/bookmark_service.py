"""
Service layer for bookmark operations.

Coordinates the multi-step bookmark writes: inline folder creation before the
bookmark write, timestamp assignment, favicon derivation and tag usage
bookkeeping. Each step is atomic only at the single-record level; there is no
transaction across bookmark, folder and tag writes.
"""
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Literal

from core.config import Settings
from records.base import BOOKMARK_TABLE, OrderBy, RecordClient, WhereCondition
from schemas.bookmark import Bookmark, BookmarkCounts, BookmarkCreate, BookmarkUpdate
from services.aggregates import (
    active_bookmarks,
    archived_bookmarks,
    bookmark_counts,
    pinned_bookmarks,
    recent_bookmarks,
    sort_newest_first,
)
from services.base_entity_service import BaseEntityService
from services.exceptions import ValidationError
from services.folder_service import FolderService
from services.normalizer import favicon_url_for, normalize_bookmark, to_bookmark_record
from services.search_service import filter_bookmarks
from services.tag_service import TagService
from services.utils import coerce_payload

logger = logging.getLogger(__name__)

BookmarkView = Literal["all", "active", "archived", "pinned", "recent"]

# Fields a caller may change directly on update
_EDITABLE_FIELDS = ("url", "title", "description", "tags", "is_pinned", "is_archived")


class BookmarkService(BaseEntityService[Bookmark]):
    """Bookmark lookups and the mutation coordinator for bookmark writes."""

    table = BOOKMARK_TABLE
    entity_name = "Bookmark"
    fields = [
        "Name",
        "title_c",
        "url_c",
        "description_c",
        "tags_c",
        "favicon_c",
        "folder_id_c",
        "date_added_c",
        "date_modified_c",
        "is_pinned_c",
        "is_archived_c",
    ]

    def __init__(
        self,
        client: RecordClient,
        tag_service: TagService,
        folder_service: FolderService,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(client, settings)
        self.tag_service = tag_service
        self.folder_service = folder_service

    def _normalize(self, record: Mapping[str, Any]) -> Bookmark:
        return normalize_bookmark(record, self.settings.favicon_service_url)

    def _to_record(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return to_bookmark_record(values)

    def _favicon(self, url: str) -> str | None:
        return favicon_url_for(url, self.settings.favicon_service_url)

    async def _fetch_newest_first(
        self, where: list[WhereCondition] | None = None,
    ) -> list[Bookmark]:
        bookmarks = await self._fetch(
            self._params(
                where=where,
                order_by=[OrderBy(field_name="date_added_c", sort_type="DESC")],
            ),
        )
        # The store's ordering is not guaranteed stable; re-sort locally.
        return sort_newest_first(bookmarks)

    # --- Reads ---

    async def get_all(self) -> list[Bookmark]:
        """All bookmarks (archived included), newest first."""
        return await self._fetch_newest_first()

    async def load_all(self) -> list[Bookmark]:
        """
        All bookmarks for a write path, newest first.

        Raises:
            RemoteFailureError: If the store call failed, instead of degrading
                to an empty list.
        """
        bookmarks = await self._fetch_strict(
            self._params(order_by=[OrderBy(field_name="date_added_c", sort_type="DESC")]),
            "load bookmarks",
        )
        return sort_newest_first(bookmarks)

    async def get_active(self) -> list[Bookmark]:
        """Non-archived bookmarks, newest first."""
        return active_bookmarks(await self.get_all())

    async def get_archived(self) -> list[Bookmark]:
        """Archived bookmarks, newest first."""
        return archived_bookmarks(await self.get_all())

    async def get_pinned(self) -> list[Bookmark]:
        """Pinned bookmarks that are not archived, newest first."""
        return pinned_bookmarks(await self.get_all())

    async def get_recent(self, now: datetime | None = None) -> list[Bookmark]:
        """Bookmarks (archived included) added within the recent window, newest first."""
        return recent_bookmarks(
            await self.get_all(), now, self.settings.recent_window_days,
        )

    async def get_by_tag(self, tag: str) -> list[Bookmark]:
        """Bookmarks carrying ``tag`` (exact, case-sensitive name), newest first."""
        candidates = await self._fetch_newest_first(
            where=[WhereCondition(field_name="tags_c", operator="Contains", values=[tag])],
        )
        # Contains is a substring match on the joined list
        return [b for b in candidates if tag in b.tags]

    async def get_by_folder(self, folder_id: int) -> list[Bookmark]:
        """Bookmarks filed under ``folder_id``, newest first."""
        return await self._fetch_newest_first(
            where=[WhereCondition(field_name="folder_id_c", values=[folder_id])],
        )

    async def get_view(self, view: BookmarkView, now: datetime | None = None) -> list[Bookmark]:
        """Bookmarks for a named view."""
        if view == "active":
            return await self.get_active()
        if view == "archived":
            return await self.get_archived()
        if view == "pinned":
            return await self.get_pinned()
        if view == "recent":
            return await self.get_recent(now)
        return await self.get_all()

    async def search(
        self,
        query: str | None = None,
        view: BookmarkView = "active",
        tag: str | None = None,
        folder_id: int | None = None,
    ) -> list[Bookmark]:
        """
        List bookmarks for a view, narrowed by tag, folder and a text query.

        Args:
            query: Case-insensitive substring matched against title, url,
                description and tag names. Blank returns the view unfiltered.
            view: Which partition of the bookmark list to start from.
            tag: Keep only bookmarks carrying this exact tag name.
            folder_id: Keep only bookmarks filed under this folder.

        Returns:
            Matching bookmarks, newest first.
        """
        bookmarks = await self.get_view(view)
        if tag is not None:
            bookmarks = [b for b in bookmarks if tag in b.tags]
        if folder_id is not None:
            bookmarks = [b for b in bookmarks if b.folder_id == folder_id]
        return filter_bookmarks(bookmarks, query)

    async def get_counts(self, now: datetime | None = None) -> BookmarkCounts:
        """Sidebar counts derived from the current bookmark list."""
        return bookmark_counts(await self.get_all(), now, self.settings.recent_window_days)

    # --- Writes ---

    async def create(self, data: BookmarkCreate | Mapping[str, Any]) -> Bookmark:
        """
        Create a bookmark.

        When ``new_folder`` is given the folder is created first and the
        bookmark is filed into it. A failed folder creation aborts the
        bookmark write. ``date_added`` and ``date_modified`` are both set to
        the current time.

        Raises:
            ValidationError: If the url, title or inline folder is invalid.
            RemoteFailureError: If a store write failed.
        """
        payload = coerce_payload(BookmarkCreate, data, self.settings)

        folder_id = payload.folder_id
        if payload.new_folder is not None:
            folder = await self.folder_service.create(payload.new_folder)
            folder_id = folder.id

        now = datetime.now(UTC)
        bookmark = await self._create({
            "url": payload.url,
            "title": payload.title,
            "description": payload.description,
            "tags": payload.tags,
            "favicon_url": self._favicon(payload.url),
            "folder_id": folder_id,
            "date_added": now,
            "date_modified": now,
            "is_pinned": payload.is_pinned,
            "is_archived": payload.is_archived,
        })
        logger.info("Created bookmark %s for %s", bookmark.id, bookmark.url)

        await self.tag_service.apply_tag_changes([], bookmark.tags)
        return bookmark

    async def update(
        self, bookmark_id: int, data: BookmarkUpdate | Mapping[str, Any],
    ) -> Bookmark:
        """
        Update a bookmark.

        Omitted fields are left unchanged. ``date_added`` is always preserved
        and ``date_modified`` is refreshed. Tag usage counts are credited and
        debited for the names added and removed.

        Raises:
            NotFoundError: If the bookmark does not exist.
            ValidationError: If a provided field is invalid.
            RemoteFailureError: If a store write failed.
        """
        payload = coerce_payload(BookmarkUpdate, data, self.settings)
        provided = payload.model_fields_set

        for required in ("url", "title"):
            if required in provided and getattr(payload, required) is None:
                raise ValidationError(required, f"{required.capitalize()} is required")

        current = await self._require(bookmark_id)

        changes: dict[str, Any] = {
            name: getattr(payload, name)
            for name in _EDITABLE_FIELDS
            if name in provided and getattr(payload, name) is not None
        }
        if "url" in changes and changes["url"] != current.url:
            changes["favicon_url"] = self._favicon(changes["url"])

        if payload.new_folder is not None:
            folder = await self.folder_service.create(payload.new_folder)
            changes["folder_id"] = folder.id
        elif "folder_id" in provided:
            changes["folder_id"] = payload.folder_id

        changes["date_modified"] = datetime.now(UTC)
        updated = await self._update(current, changes)

        if "tags" in changes:
            await self.tag_service.apply_tag_changes(current.tags, updated.tags)
        return updated

    async def delete(self, bookmark_id: int) -> None:
        """
        Permanently delete a bookmark and debit its tags.

        Raises:
            NotFoundError: If the bookmark does not exist.
            RemoteFailureError: If a store write failed.
        """
        current = await self._require(bookmark_id)
        await self._delete(bookmark_id)
        logger.info("Deleted bookmark %s", bookmark_id)
        await self.tag_service.apply_tag_changes(current.tags, [])

    async def toggle_pin(self, bookmark_id: int) -> Bookmark:
        """
        Flip ``is_pinned``. Read-modify-write; concurrent toggles can race.

        Raises:
            NotFoundError: If the bookmark does not exist.
        """
        current = await self._require(bookmark_id)
        return await self._update(
            current,
            {"is_pinned": not current.is_pinned, "date_modified": datetime.now(UTC)},
        )

    async def toggle_archive(self, bookmark_id: int) -> Bookmark:
        """
        Flip ``is_archived``. The pin flag is left as it is.

        Raises:
            NotFoundError: If the bookmark does not exist.
        """
        current = await self._require(bookmark_id)
        return await self._update(
            current,
            {"is_archived": not current.is_archived, "date_modified": datetime.now(UTC)},
        )
