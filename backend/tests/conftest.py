"""Pytest fixtures for testing."""
from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from core.config import Settings, get_settings
from records.local_client import LocalRecordClient
from services.analytics_service import AnalyticsService
from services.bookmark_service import BookmarkService
from services.folder_service import FolderService
from services.sharing_service import FolderSharingService
from services.tag_service import TagService


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep a developer's environment from leaking into tests."""
    monkeypatch.setenv("RECORD_STORE_URL", "")
    monkeypatch.setenv("OPENAI_API_KEY", "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory holding the local store's table files."""
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    """Settings pointing the local fallback store at a temporary directory."""
    return Settings(
        _env_file=None,
        record_store_url="",
        local_data_dir=data_dir,
        public_base_url="https://linkvault.test",
    )


@pytest.fixture
def record_client(data_dir: Path) -> LocalRecordClient:
    """A fresh, empty local record store."""
    return LocalRecordClient(data_dir)


@pytest.fixture
def tag_service(record_client: LocalRecordClient, settings: Settings) -> TagService:
    return TagService(record_client, settings)


@pytest.fixture
def folder_service(record_client: LocalRecordClient, settings: Settings) -> FolderService:
    return FolderService(record_client, settings)


@pytest.fixture
def bookmark_service(
    record_client: LocalRecordClient,
    tag_service: TagService,
    folder_service: FolderService,
    settings: Settings,
) -> BookmarkService:
    return BookmarkService(record_client, tag_service, folder_service, settings)


@pytest.fixture
def sharing_service(
    record_client: LocalRecordClient,
    bookmark_service: BookmarkService,
    settings: Settings,
) -> FolderSharingService:
    return FolderSharingService(record_client, bookmark_service, settings)


@pytest.fixture
def analytics_service(
    record_client: LocalRecordClient, settings: Settings,
) -> AnalyticsService:
    return AnalyticsService(record_client, settings)


@pytest.fixture
async def client(
    record_client: LocalRecordClient,
    settings: Settings,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client backed by the temporary local store."""
    from api.dependencies import get_record_client
    from api.main import app

    app.dependency_overrides[get_record_client] = lambda: record_client
    app.dependency_overrides[get_settings] = lambda: settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
