"""Tag management endpoints."""
from fastapi import APIRouter, Depends, status

from api.dependencies import get_bookmark_service, get_tag_service
from schemas.tag import Tag, TagCreate, TagListResponse, TagReconcileResponse
from services.bookmark_service import BookmarkService
from services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=TagListResponse)
async def list_tags(
    service: TagService = Depends(get_tag_service),
) -> TagListResponse:
    """
    Get all tags with their usage counts.

    Results are sorted by usage_count DESC, then name ASC.
    """
    return TagListResponse(tags=await service.get_all())


@router.post("/", response_model=Tag, status_code=status.HTTP_201_CREATED)
async def create_tag(
    data: TagCreate,
    service: TagService = Depends(get_tag_service),
) -> Tag:
    """Create a tag. Returns the existing tag if the name is already taken."""
    return await service.create(data)


@router.post("/reconcile", response_model=TagReconcileResponse)
async def reconcile_tags(
    service: TagService = Depends(get_tag_service),
    bookmark_service: BookmarkService = Depends(get_bookmark_service),
) -> TagReconcileResponse:
    """Recompute stored usage counts from the current bookmarks."""
    bookmarks = await bookmark_service.load_all()
    return await service.reconcile_usage(bookmarks)


@router.delete("/{tag_name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_name: str,
    service: TagService = Depends(get_tag_service),
) -> None:
    """
    Delete a tag.

    Bookmarks that reference the tag keep the name. Returns 404 if the tag
    doesn't exist.
    """
    await service.delete(tag_name)
