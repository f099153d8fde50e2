"""Bookmark CRUD endpoints."""
from fastapi import APIRouter, Depends, Query

from api.dependencies import (
    get_analytics_service,
    get_bookmark_service,
    get_description_service,
)
from schemas.analytics import UsageEvent, UsageEventCreate
from schemas.bookmark import (
    Bookmark,
    BookmarkCounts,
    BookmarkCreate,
    BookmarkListResponse,
    BookmarkUpdate,
    DescriptionRequest,
    GeneratedDescription,
    TitleSuggestion,
)
from services.analytics_service import AnalyticsService
from services.bookmark_service import BookmarkService, BookmarkView
from services.description_service import DescriptionService
from services.exceptions import NotFoundError, ValidationError
from services.normalizer import suggest_title

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.post("/", response_model=Bookmark, status_code=201)
async def create_bookmark(
    data: BookmarkCreate,
    service: BookmarkService = Depends(get_bookmark_service),
) -> Bookmark:
    """
    Create a new bookmark.

    Supply `new_folder` instead of `folder_id` to create a folder and file the
    bookmark into it in one request.
    """
    return await service.create(data)


@router.get("/", response_model=BookmarkListResponse)
async def list_bookmarks(
    q: str | None = Query(default=None, description="Case-insensitive text filter"),
    view: BookmarkView = Query(default="active", description="Which bookmarks to list"),
    tag: str | None = Query(default=None, description="Only bookmarks with this exact tag"),
    folder_id: int | None = Query(default=None, description="Only bookmarks in this folder"),
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkListResponse:
    """
    List bookmarks, newest first.

    - **view**: `active` (default), `archived`, `pinned`, `recent` or `all`
    - **q**: case-insensitive substring filter
    """
    items = await service.search(query=q, view=view, tag=tag, folder_id=folder_id)
    return BookmarkListResponse(items=items, total=len(items))


@router.get("/summary", response_model=BookmarkCounts)
async def bookmark_summary(
    service: BookmarkService = Depends(get_bookmark_service),
) -> BookmarkCounts:
    """Total, recent, pinned and archived counts for the sidebar."""
    return await service.get_counts()


@router.get("/suggest-title", response_model=TitleSuggestion)
async def suggest_bookmark_title(
    url: str = Query(..., description="URL to derive a title from"),
) -> TitleSuggestion:
    """Suggest a placeholder title from the URL's host."""
    title = suggest_title(url)
    if title is None:
        raise ValidationError("url", "Please enter a valid URL")
    return TitleSuggestion(url=url, title=title)


@router.post("/generate-description", response_model=GeneratedDescription)
async def generate_bookmark_description(
    data: DescriptionRequest,
    service: DescriptionService = Depends(get_description_service),
) -> GeneratedDescription:
    """Generate a short description from the bookmark title."""
    description = await service.generate(data.title)
    return GeneratedDescription(title=data.title.strip(), description=description)


@router.get("/{bookmark_id}", response_model=Bookmark)
async def get_bookmark(
    bookmark_id: int,
    service: BookmarkService = Depends(get_bookmark_service),
) -> Bookmark:
    """Get a single bookmark by ID."""
    bookmark = await service.get_by_id(bookmark_id)
    if bookmark is None:
        raise NotFoundError("Bookmark", bookmark_id)
    return bookmark


@router.patch("/{bookmark_id}", response_model=Bookmark)
async def update_bookmark(
    bookmark_id: int,
    data: BookmarkUpdate,
    service: BookmarkService = Depends(get_bookmark_service),
) -> Bookmark:
    """Update a bookmark. Omitted fields are left unchanged."""
    return await service.update(bookmark_id, data)


@router.delete("/{bookmark_id}", status_code=204)
async def delete_bookmark(
    bookmark_id: int,
    service: BookmarkService = Depends(get_bookmark_service),
) -> None:
    """Permanently delete a bookmark."""
    await service.delete(bookmark_id)


@router.post("/{bookmark_id}/pin", response_model=Bookmark)
async def toggle_pin(
    bookmark_id: int,
    service: BookmarkService = Depends(get_bookmark_service),
) -> Bookmark:
    """Pin an unpinned bookmark, or unpin a pinned one."""
    return await service.toggle_pin(bookmark_id)


@router.post("/{bookmark_id}/archive", response_model=Bookmark)
async def toggle_archive(
    bookmark_id: int,
    service: BookmarkService = Depends(get_bookmark_service),
) -> Bookmark:
    """Archive an active bookmark, or restore an archived one."""
    return await service.toggle_archive(bookmark_id)


@router.post("/{bookmark_id}/usage", response_model=UsageEvent, status_code=201)
async def track_bookmark_usage(
    bookmark_id: int,
    data: UsageEventCreate | None = None,
    service: BookmarkService = Depends(get_bookmark_service),
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> UsageEvent:
    """Record that a bookmark was used (e.g. opened)."""
    if await service.get_by_id(bookmark_id) is None:
        raise NotFoundError("Bookmark", bookmark_id)
    return await analytics.track_usage(bookmark_id, data)
