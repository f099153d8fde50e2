"""Folder and folder-sharing endpoints."""
from fastapi import APIRouter, Depends

from api.dependencies import get_bookmark_service, get_folder_service, get_sharing_service
from schemas.folder import (
    Folder,
    FolderCreate,
    FolderListResponse,
    FolderUpdate,
    ShareFolderRequest,
    ShareLinkResponse,
    SharePermissionsUpdate,
)
from services.bookmark_service import BookmarkService
from services.exceptions import NotFoundError
from services.folder_service import FolderService
from services.sharing_service import FolderSharingService

router = APIRouter(prefix="/folders", tags=["folders"])


@router.get("/", response_model=FolderListResponse)
async def list_folders(
    service: FolderService = Depends(get_folder_service),
    bookmark_service: BookmarkService = Depends(get_bookmark_service),
) -> FolderListResponse:
    """List folders by name, with bookmark counts derived from the current bookmarks."""
    bookmarks = await bookmark_service.get_all()
    return FolderListResponse(items=await service.get_all_with_counts(bookmarks))


@router.get("/shared", response_model=FolderListResponse)
async def list_shared_folders(
    sharing: FolderSharingService = Depends(get_sharing_service),
) -> FolderListResponse:
    """List folders that are currently shared."""
    return FolderListResponse(items=await sharing.get_shared_folders())


@router.post("/", response_model=Folder, status_code=201)
async def create_folder(
    data: FolderCreate,
    service: FolderService = Depends(get_folder_service),
) -> Folder:
    """Create a folder. The color defaults when omitted."""
    return await service.create(data)


@router.get("/{folder_id}", response_model=Folder)
async def get_folder(
    folder_id: int,
    service: FolderService = Depends(get_folder_service),
) -> Folder:
    """Get a single folder by ID."""
    folder = await service.get_by_id(folder_id)
    if folder is None:
        raise NotFoundError("Folder", folder_id)
    return folder


@router.patch("/{folder_id}", response_model=Folder)
async def update_folder(
    folder_id: int,
    data: FolderUpdate,
    service: FolderService = Depends(get_folder_service),
) -> Folder:
    """
    Update a folder.

    Returns 422 if the new parent would make the folder its own ancestor.
    """
    return await service.update(folder_id, data)


@router.delete("/{folder_id}", status_code=204)
async def delete_folder(
    folder_id: int,
    service: FolderService = Depends(get_folder_service),
) -> None:
    """Delete a folder. Its bookmarks and subfolders are moved to the top level."""
    await service.delete(folder_id)


@router.post("/{folder_id}/share", response_model=Folder)
async def share_folder(
    folder_id: int,
    data: ShareFolderRequest,
    sharing: FolderSharingService = Depends(get_sharing_service),
) -> Folder:
    """Share a folder with one or more recipients."""
    return await sharing.share_folder(folder_id, data)


@router.patch("/{folder_id}/share", response_model=Folder)
async def update_share_permissions(
    folder_id: int,
    data: SharePermissionsUpdate,
    sharing: FolderSharingService = Depends(get_sharing_service),
) -> Folder:
    """Change the permission level of a shared folder."""
    return await sharing.update_share_permissions(folder_id, data)


@router.delete("/{folder_id}/share", response_model=Folder)
async def unshare_folder(
    folder_id: int,
    sharing: FolderSharingService = Depends(get_sharing_service),
) -> Folder:
    """Stop sharing a folder."""
    return await sharing.unshare_folder(folder_id)


@router.get("/{folder_id}/share-link", response_model=ShareLinkResponse)
async def get_share_link(
    folder_id: int,
    sharing: FolderSharingService = Depends(get_sharing_service),
) -> ShareLinkResponse:
    """Get the public link of a shared folder. Returns 404 if it is not shared."""
    return await sharing.share_link(folder_id)
