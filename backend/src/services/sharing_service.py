"""
Folder sharing.

A folder moves between two states: unshared, and shared with one or more
recipients at a permission level (view or edit). Changing the permission level
keeps the folder shared. Unsharing always clears the recipients and resets the
permission level to view.

Share links embed a token derived from the folder id. The token is the
unpadded, lower-cased base32 encoding of the decimal id, so it is URL-safe,
deterministic and exactly reversible.
"""
import base64
import logging
from collections.abc import Mapping
from typing import Any

from core.config import Settings
from records.base import OrderBy, RecordClient, WhereCondition
from schemas.folder import (
    Folder,
    SharePermission,
    ShareFolderRequest,
    SharePermissionsUpdate,
    ShareLinkResponse,
)
from schemas.shared_folder import SharedFolderView
from services.bookmark_service import BookmarkService
from services.exceptions import NotFoundError
from services.folder_service import FolderService
from services.utils import coerce_payload

logger = logging.getLogger(__name__)


def encode_share_token(folder_id: int) -> str:
    """
    Encode a folder id as a share token.

    Raises:
        ValueError: If ``folder_id`` is not a positive integer.
    """
    if isinstance(folder_id, bool) or not isinstance(folder_id, int) or folder_id <= 0:
        raise ValueError(f"Invalid folder id: {folder_id!r}")
    encoded = base64.b32encode(str(folder_id).encode("ascii")).decode("ascii")
    return encoded.rstrip("=").lower()


def decode_share_token(token: str) -> int:
    """
    Decode a share token back to the folder id.

    Only canonical tokens (those ``encode_share_token`` produces) are
    accepted.

    Raises:
        ValueError: If the token is malformed or does not encode a positive id.
    """
    if not token or not (token.isascii() and token.isalnum()):
        raise ValueError(f"Malformed share token: {token!r}")
    padded = token.upper() + "=" * (-len(token) % 8)
    try:
        digits = base64.b32decode(padded).decode("ascii")
    except ValueError as e:
        raise ValueError(f"Malformed share token: {token!r}") from e
    if not digits.isdigit() or int(digits) <= 0:
        raise ValueError(f"Share token does not encode a folder id: {token!r}")
    folder_id = int(digits)
    if encode_share_token(folder_id) != token:
        raise ValueError(f"Non-canonical share token: {token!r}")
    return folder_id


class FolderSharingService(FolderService):
    """Share state transitions, share links and token resolution for folders."""

    def __init__(
        self,
        client: RecordClient,
        bookmark_service: BookmarkService,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(client, settings)
        self.bookmark_service = bookmark_service

    async def share_folder(
        self, folder_id: int, data: ShareFolderRequest | Mapping[str, Any],
    ) -> Folder:
        """
        Share a folder with the given recipients.

        Recipients replace any previous recipient list.

        Raises:
            ValidationError: If the recipient list is empty or holds an
                invalid email address.
            NotFoundError: If the folder does not exist.
            RemoteFailureError: If the store rejected the write.
        """
        payload = coerce_payload(ShareFolderRequest, data, self.settings)
        current = await self._require(folder_id)
        folder = await self._update(current, {
            "is_shared": True,
            "shared_with": payload.recipients,
            "share_permissions": payload.permissions,
        })
        logger.info(
            "Shared folder %s with %d recipient(s) (%s)",
            folder_id, len(payload.recipients), payload.permissions.value,
        )
        return folder

    async def unshare_folder(self, folder_id: int) -> Folder:
        """
        Stop sharing a folder. Recipients are cleared and permissions reset to view.

        Raises:
            NotFoundError: If the folder does not exist.
        """
        current = await self._require(folder_id)
        folder = await self._update(current, {
            "is_shared": False,
            "shared_with": [],
            "share_permissions": SharePermission.VIEW,
        })
        logger.info("Unshared folder %s", folder_id)
        return folder

    async def update_share_permissions(
        self, folder_id: int, data: SharePermissionsUpdate | Mapping[str, Any],
    ) -> Folder:
        """
        Change the permission level of a shared folder.

        The field is written even when the folder is not currently shared.

        Raises:
            NotFoundError: If the folder does not exist.
        """
        payload = coerce_payload(SharePermissionsUpdate, data, self.settings)
        current = await self._require(folder_id)
        if not current.is_shared:
            logger.warning(
                "Updating share permissions of folder %s, which is not shared", folder_id,
            )
        return await self._update(
            current, {"share_permissions": payload.permissions},
        )

    async def get_shared_folders(self) -> list[Folder]:
        """All currently shared folders, ordered by name."""
        folders = await self._fetch(
            self._params(
                where=[WhereCondition(field_name="shared_c", values=[True])],
                order_by=[OrderBy(field_name="Name", sort_type="ASC")],
            ),
        )
        shared = [folder for folder in folders if folder.is_shared]
        return sorted(shared, key=lambda f: f.name.lower())

    def generate_share_link(self, folder_id: int) -> str:
        """Build the public share URL for a folder id."""
        token = encode_share_token(folder_id)
        return f"{self.settings.public_base_url}/shared/folder/{token}"

    async def share_link(self, folder_id: int) -> ShareLinkResponse:
        """
        Share link for a folder that is currently shared.

        Raises:
            NotFoundError: If the folder does not exist or is not shared.
        """
        folder = await self._require(folder_id)
        if not folder.is_shared:
            raise NotFoundError("Shared folder", folder_id)
        return ShareLinkResponse(
            folder_id=folder_id,
            token=encode_share_token(folder_id),
            url=self.generate_share_link(folder_id),
        )

    async def resolve_shared_folder(self, token: str) -> SharedFolderView:
        """
        Resolve a share token to the folder and its non-archived bookmarks.

        Access is granted only while the folder is shared.

        Raises:
            NotFoundError: If the token is invalid, the folder does not exist,
                or the folder is not currently shared.
        """
        try:
            folder_id = decode_share_token(token)
        except ValueError as e:
            logger.info("Rejected share token %r: %s", token, e)
            raise NotFoundError("Shared folder", token) from e

        folder = await self.get_by_id(folder_id)
        if folder is None or not folder.is_shared:
            raise NotFoundError("Shared folder", token)

        bookmarks = await self.bookmark_service.get_by_folder(folder_id)
        return SharedFolderView(
            folder=folder,
            bookmarks=[b for b in bookmarks if not b.is_archived],
            can_edit=folder.share_permissions == SharePermission.EDIT,
        )
