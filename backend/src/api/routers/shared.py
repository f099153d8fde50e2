"""Public shared-folder endpoint."""
from fastapi import APIRouter, Depends

from api.dependencies import get_sharing_service
from schemas.shared_folder import SharedFolderView
from services.sharing_service import FolderSharingService

router = APIRouter(prefix="/shared", tags=["shared"])


@router.get("/folder/{token}", response_model=SharedFolderView)
async def get_shared_folder(
    token: str,
    sharing: FolderSharingService = Depends(get_sharing_service),
) -> SharedFolderView:
    """
    Resolve a share link.

    Returns the folder and its active bookmarks, and whether the recipient may
    edit them. Returns 404 for unknown tokens and folders that are no longer
    shared.
    """
    return await sharing.resolve_shared_folder(token)
