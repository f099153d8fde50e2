"""
Service layer for folder operations.

Folders may nest through ``parent_id``. Nesting depth is unconstrained but the
hierarchy is kept acyclic: an update that would make a folder its own
ancestor is rejected.

Deleting a folder does not delete its contents. Bookmarks filed under it and
child folders nested under it are detached (their reference is set to null)
before the folder itself is removed.
"""
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from records.base import (
    BOOKMARK_TABLE,
    FOLDER_TABLE,
    FetchParams,
    OrderBy,
    PagingInfo,
    WhereCondition,
)
from schemas.bookmark import Bookmark
from schemas.folder import Folder, FolderCreate, FolderUpdate, SharePermission
from services.aggregates import folder_bookmark_counts, with_bookmark_counts
from services.base_entity_service import BaseEntityService
from services.exceptions import NotFoundError, RemoteFailureError, ValidationError
from services.normalizer import normalize_folder, to_folder_record, unwrap_reference
from services.utils import coerce_payload, unwrap_write

logger = logging.getLogger(__name__)


class FolderService(BaseEntityService[Folder]):
    """CRUD, hierarchy checks and cached-count maintenance for folders."""

    table = FOLDER_TABLE
    entity_name = "Folder"
    fields = [
        "Name",
        "name_c",
        "color_c",
        "parent_id_c",
        "bookmark_count_c",
        "shared_c",
        "shared_with_c",
        "share_permissions_c",
    ]

    def _normalize(self, record: Mapping[str, Any]) -> Folder:
        return normalize_folder(record)

    def _to_record(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return to_folder_record(values)

    # --- Reads ---

    async def get_all(self) -> list[Folder]:
        """All folders sorted by name (case-insensitive)."""
        folders = await self._fetch(
            self._params(order_by=[OrderBy(field_name="Name", sort_type="ASC")]),
        )
        return sorted(folders, key=lambda f: f.name.lower())

    async def get_all_with_counts(self, bookmarks: Iterable[Bookmark]) -> list[Folder]:
        """All folders with ``bookmark_count`` derived from ``bookmarks`` instead of the cache."""
        return with_bookmark_counts(await self.get_all(), bookmarks)

    async def get_children(self, folder_id: int) -> list[Folder]:
        """Folders whose parent is ``folder_id``."""
        return await self._fetch(self._children_params(folder_id))

    # --- Writes ---

    async def create(self, data: FolderCreate | Mapping[str, Any]) -> Folder:
        """
        Create a folder.

        The bookmark count always starts at 0 and the folder starts unshared,
        whatever the caller supplied.

        Raises:
            ValidationError: If the name or color is invalid, or the parent
                folder does not exist.
            RemoteFailureError: If the store rejected the write.
        """
        payload = coerce_payload(FolderCreate, data, self.settings)
        if payload.parent_id is not None:
            await self._check_parent_exists(payload.parent_id)

        folder = await self._create({
            "name": payload.name,
            "color": payload.color,
            "parent_id": payload.parent_id,
            "bookmark_count": 0,
            "is_shared": False,
            "shared_with": [],
            "share_permissions": SharePermission.VIEW,
        })
        logger.info("Created folder %s '%s'", folder.id, folder.name)
        return folder

    async def update(self, folder_id: int, data: FolderUpdate | Mapping[str, Any]) -> Folder:
        """
        Update a folder's name, color or parent.

        An explicit ``parent_id`` of null moves the folder to the top level;
        omitting it leaves the parent unchanged.

        Raises:
            NotFoundError: If the folder does not exist.
            ValidationError: If a field is invalid, the new parent does not
                exist, or the move would create a cycle.
        """
        payload = coerce_payload(FolderUpdate, data, self.settings)
        current = await self._require(folder_id)

        changes: dict[str, Any] = {}
        if payload.name is not None:
            changes["name"] = payload.name
        if payload.color is not None:
            changes["color"] = payload.color
        if "parent_id" in payload.model_fields_set and payload.parent_id != current.parent_id:
            if payload.parent_id is not None:
                await self._check_acyclic(folder_id, payload.parent_id)
            changes["parent_id"] = payload.parent_id

        if not changes:
            return current
        return await self._update(current, changes)

    async def delete(self, folder_id: int) -> None:
        """
        Delete a folder, detaching its bookmarks and child folders first.

        Raises:
            NotFoundError: If the folder does not exist.
            RemoteFailureError: If any store write failed. Detachments that
                already succeeded are not rolled back.
        """
        await self._require(folder_id)

        detached = await self._detach_bookmarks(folder_id)
        children = await self._fetch_strict(
            self._children_params(folder_id), f"load child folders of {folder_id}",
        )
        for child in children:
            await self._update(child, {"parent_id": None})

        await self._delete(folder_id)
        logger.info(
            "Deleted folder %s (detached %d bookmarks, %d child folders)",
            folder_id, detached, len(children),
        )

    async def sync_bookmark_counts(self, bookmarks: Iterable[Bookmark]) -> list[Folder]:
        """
        Rewrite cached bookmark counts that drifted from the derived aggregate.

        Returns:
            The folders whose cached count was corrected.
        """
        counts = folder_bookmark_counts(bookmarks)
        folders = await self._fetch_strict(self._params(), "load folders")
        corrected = []
        for folder in folders:
            derived = counts.get(folder.id, 0)
            if folder.bookmark_count != derived:
                corrected.append(await self._update(folder, {"bookmark_count": derived}))
        return corrected

    # --- Helpers ---

    def _children_params(self, folder_id: int) -> FetchParams:
        return self._params(where=[WhereCondition(field_name="parent_id_c", values=[folder_id])])

    async def _check_parent_exists(self, parent_id: int) -> None:
        try:
            await self._require(parent_id)
        except NotFoundError as e:
            raise ValidationError("parent_id", f"Parent folder {parent_id} does not exist") from e

    async def _check_acyclic(self, folder_id: int, parent_id: int) -> None:
        """
        Walk the ancestor chain of ``parent_id`` and reject it if it reaches ``folder_id``.

        Raises:
            ValidationError: If the parent is missing or the move would create a cycle.
        """
        if parent_id == folder_id:
            raise ValidationError("parent_id", "A folder cannot be its own parent")

        folders = {
            folder.id: folder
            for folder in await self._fetch_strict(self._params(), "load folders")
        }
        if parent_id not in folders:
            raise ValidationError("parent_id", f"Parent folder {parent_id} does not exist")

        visited: set[int] = set()
        ancestor_id: int | None = parent_id
        while ancestor_id is not None and ancestor_id not in visited:
            if ancestor_id == folder_id:
                raise ValidationError(
                    "parent_id", "A folder cannot be moved into one of its own subfolders",
                )
            visited.add(ancestor_id)
            ancestor = folders.get(ancestor_id)
            ancestor_id = ancestor.parent_id if ancestor is not None else None

    async def _detach_bookmarks(self, folder_id: int) -> int:
        """Set ``folder_id`` to null on every bookmark filed under the folder."""
        action = f"detach bookmarks from folder {folder_id}"
        params = FetchParams(
            fields=["folder_id_c"],
            where=[WhereCondition(field_name="folder_id_c", values=[folder_id])],
            paging_info=PagingInfo(limit=self.settings.page_size, offset=0),
        )
        response = await self._call_write(
            self.client.fetch_records(BOOKMARK_TABLE, params), action,
        )
        if not response.success or not isinstance(response.data, list):
            raise RemoteFailureError(response.message or f"Failed to {action}")
        records = response.data
        ids = [
            record["Id"] for record in records
            if "Id" in record and unwrap_reference(record.get("folder_id_c")) == folder_id
        ]
        if not ids:
            return 0
        updates = [{"Id": record_id, "folder_id_c": None} for record_id in ids]
        response = await self._call_write(
            self.client.update_record(BOOKMARK_TABLE, updates), action,
        )
        unwrap_write(response, action)
        return len(ids)
