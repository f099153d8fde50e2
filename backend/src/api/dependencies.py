"""FastAPI dependencies for injection."""
from fastapi import Depends, Request

from core.config import Settings, get_settings
from records.base import RecordClient
from services.analytics_service import AnalyticsService
from services.bookmark_service import BookmarkService
from services.description_service import DescriptionService
from services.folder_service import FolderService
from services.sharing_service import FolderSharingService
from services.tag_service import TagService


def get_record_client(request: Request) -> RecordClient:
    """The record client constructed at startup by the application lifespan."""
    return request.app.state.record_client


def get_tag_service(
    client: RecordClient = Depends(get_record_client),
    settings: Settings = Depends(get_settings),
) -> TagService:
    return TagService(client, settings)


def get_folder_service(
    client: RecordClient = Depends(get_record_client),
    settings: Settings = Depends(get_settings),
) -> FolderService:
    return FolderService(client, settings)


def get_bookmark_service(
    client: RecordClient = Depends(get_record_client),
    tag_service: TagService = Depends(get_tag_service),
    folder_service: FolderService = Depends(get_folder_service),
    settings: Settings = Depends(get_settings),
) -> BookmarkService:
    return BookmarkService(client, tag_service, folder_service, settings)


def get_sharing_service(
    client: RecordClient = Depends(get_record_client),
    bookmark_service: BookmarkService = Depends(get_bookmark_service),
    settings: Settings = Depends(get_settings),
) -> FolderSharingService:
    return FolderSharingService(client, bookmark_service, settings)


def get_description_service(settings: Settings = Depends(get_settings)) -> DescriptionService:
    return DescriptionService(settings)


def get_analytics_service(
    client: RecordClient = Depends(get_record_client),
    settings: Settings = Depends(get_settings),
) -> AnalyticsService:
    return AnalyticsService(client, settings)


__all__ = [
    "get_analytics_service",
    "get_bookmark_service",
    "get_description_service",
    "get_folder_service",
    "get_record_client",
    "get_settings",
    "get_sharing_service",
    "get_tag_service",
]
