"""Seed script to populate the local record store with realistic test data.

Usage:
    PYTHONPATH=backend/src python backend/scripts/seed_data.py populate
    PYTHONPATH=backend/src python backend/scripts/seed_data.py populate --force
    PYTHONPATH=backend/src python backend/scripts/seed_data.py clear
"""

import argparse
import asyncio

from core.config import get_settings
from records.base import ANALYTICS_TABLE, FetchParams, PagingInfo, RecordClient
from records.factory import create_record_client
from services.analytics_service import AnalyticsService
from services.bookmark_service import BookmarkService
from services.folder_service import FolderService
from services.sharing_service import FolderSharingService
from services.tag_service import TagService

FOLDERS = [
    {'name': 'Research', 'color': '#7c3aed'},
    {'name': 'Reading List', 'color': '#059669'},
    {'name': 'Tools', 'color': '#d97706'},
]

BOOKMARKS = [
    {
        'url': 'https://docs.python.org/3/',
        'title': 'Python Official Documentation',
        'description': 'Comprehensive reference for the Python programming language.',
        'tags': ['python', 'reference'],
        'folder': 'Research',
        'is_pinned': True,
    },
    {
        'url': 'https://developer.mozilla.org/en-US/docs/Web/JavaScript',
        'title': 'MDN Web Docs - JavaScript',
        'description': 'The definitive resource for JavaScript documentation and web APIs.',
        'tags': ['javascript', 'web-dev', 'reference'],
        'folder': 'Research',
    },
    {
        'url': 'https://fastapi.tiangolo.com/',
        'title': 'FastAPI',
        'description': 'Modern, fast web framework for building APIs with Python type hints.',
        'tags': ['python', 'api-design', 'web-dev'],
        'folder': 'Tools',
    },
    {
        'url': 'https://www.rust-lang.org/learn',
        'title': 'Learn Rust',
        'description': 'The Rust book, Rust by Example and the standard library docs.',
        'tags': ['rust', 'tutorial'],
        'folder': 'Reading List',
    },
    {
        'url': 'https://martinfowler.com/articles/practical-test-pyramid.html',
        'title': 'The Practical Test Pyramid',
        'description': 'How to structure an automated test suite.',
        'tags': ['testing', 'open-source'],
        'folder': 'Reading List',
    },
    {
        'url': 'https://owasp.org/www-project-top-ten/',
        'title': 'OWASP Top Ten',
        'description': 'Standard awareness document on web application security risks.',
        'tags': ['security', 'web-dev'],
    },
    {
        'url': 'https://www.postgresql.org/docs/current/performance-tips.html',
        'title': 'PostgreSQL Performance Tips',
        'description': 'Query planning, EXPLAIN and populating a database efficiently.',
        'tags': ['database', 'performance'],
        'is_archived': True,
    },
]

# (bookmark index, number of recorded uses)
USAGE = [(0, 5), (2, 3), (3, 1)]

SHARED_FOLDER = 'Research'
SHARED_WITH = ['teammate@example.com']


def build_services(
    client: RecordClient,
) -> tuple[BookmarkService, FolderSharingService, AnalyticsService]:
    settings = get_settings()
    tag_service = TagService(client, settings)
    folder_service = FolderService(client, settings)
    bookmark_service = BookmarkService(client, tag_service, folder_service, settings)
    sharing_service = FolderSharingService(client, bookmark_service, settings)
    return bookmark_service, sharing_service, AnalyticsService(client, settings)


async def create_folders(sharing_service: FolderSharingService) -> dict[str, int]:
    folder_ids = {}
    for data in FOLDERS:
        folder = await sharing_service.create(data)
        folder_ids[folder.name] = folder.id
    print(f'  Created {len(folder_ids)} folders')
    return folder_ids


async def create_bookmarks(
    bookmark_service: BookmarkService, folder_ids: dict[str, int],
) -> list[int]:
    bookmark_ids = []
    for data in BOOKMARKS:
        payload = {key: value for key, value in data.items() if key != 'folder'}
        if 'folder' in data:
            payload['folder_id'] = folder_ids[data['folder']]
        bookmark = await bookmark_service.create(payload)
        bookmark_ids.append(bookmark.id)
    archived = sum(1 for data in BOOKMARKS if data.get('is_archived'))
    print(f'  Created {len(bookmark_ids)} bookmarks ({archived} archived)')
    return bookmark_ids


async def record_usage(analytics_service: AnalyticsService, bookmark_ids: list[int]) -> None:
    total = 0
    for index, uses in USAGE:
        for _ in range(uses):
            await analytics_service.track_usage(bookmark_ids[index])
            total += 1
    print(f'  Recorded {total} usage events')


async def clear_data(client: RecordClient) -> None:
    bookmark_service, sharing_service, _ = build_services(client)

    bookmarks = await bookmark_service.load_all()
    for bookmark in bookmarks:
        # Deleting through the service debits tags, so unused tags disappear too
        await bookmark_service.delete(bookmark.id)

    folders = await sharing_service.get_all()
    for folder in folders:
        await sharing_service.delete(folder.id)

    events = await client.fetch_records(
        ANALYTICS_TABLE, FetchParams(paging_info=PagingInfo(limit=10_000, offset=0)),
    )
    event_ids = [record['Id'] for record in events.data or []]
    if event_ids:
        await client.delete_record(ANALYTICS_TABLE, event_ids)

    print(
        f'  Deleted {len(bookmarks)} bookmarks, {len(folders)} folders, '
        f'{len(event_ids)} usage events'
    )
    print('Clear complete.')


async def populate(force: bool = False) -> None:
    """Populate the local store with seed data."""
    client = create_record_client(get_settings())
    try:
        bookmark_service, sharing_service, analytics_service = build_services(client)

        existing = await bookmark_service.load_all()
        if existing:
            if force:
                print('Existing data found, clearing first (--force)...')
                await clear_data(client)
            else:
                print(
                    f'Data already exists ({len(existing)} bookmarks). '
                    f'Use --force to clear and re-seed.'
                )
                return

        print('Populating seed data...')
        folder_ids = await create_folders(sharing_service)
        bookmark_ids = await create_bookmarks(bookmark_service, folder_ids)
        await record_usage(analytics_service, bookmark_ids)
        await sharing_service.share_folder(folder_ids[SHARED_FOLDER], {'recipients': SHARED_WITH})
        print(f'  Shared folder: {sharing_service.generate_share_link(folder_ids[SHARED_FOLDER])}')
        print('Seed data created successfully.')
    finally:
        await client.close()


async def clear() -> None:
    """Clear all seeded data."""
    client = create_record_client(get_settings())
    try:
        await clear_data(client)
    finally:
        await client.close()


def main() -> None:
    """CLI entry point."""
    settings = get_settings()
    if settings.use_remote_store:
        print(
            "ERROR: Seed script requires RECORD_STORE_URL to be unset.\n"
            "This script modifies data directly and must only run against the local store."
        )
        raise SystemExit(1)

    parser = argparse.ArgumentParser(description='Seed the local record store with test data.')
    subparsers = parser.add_subparsers(dest='command', required=True)

    populate_parser = subparsers.add_parser('populate', help='Populate the store with test data')
    populate_parser.add_argument(
        '--force', action='store_true',
        help='Clear existing data before populating',
    )

    subparsers.add_parser('clear', help='Remove all bookmarks, folders, tags and usage events')

    args = parser.parse_args()

    if args.command == 'populate':
        asyncio.run(populate(force=args.force))
    elif args.command == 'clear':
        asyncio.run(clear())


if __name__ == '__main__':
    main()
