"""Construct the record client selected by configuration."""
import logging
from pathlib import Path

from core.config import Settings
from records.base import RecordClient
from records.http_client import HttpRecordClient
from records.local_client import LocalRecordClient

logger = logging.getLogger(__name__)


def create_record_client(settings: Settings) -> RecordClient:
    """
    Create the application's record client.

    Uses the remote store when ``record_store_url`` is configured and falls back
    to the local JSON store otherwise.
    """
    if settings.use_remote_store:
        logger.info("Using remote record store at %s", settings.record_store_url)
        return HttpRecordClient(
            base_url=settings.record_store_url,
            project_id=settings.record_store_project_id,
            public_key=settings.record_store_public_key,
            timeout=settings.record_store_timeout,
        )
    data_dir = Path(settings.local_data_dir)
    logger.info("No remote record store configured, using local store in %s", data_dir)
    return LocalRecordClient(data_dir)
