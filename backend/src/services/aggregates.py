"""
Derived aggregates over in-memory bookmark lists.

Pure functions with no side effects. Counts are never maintained
incrementally by mutations; callers recompute them from a fresh list after
any change to tag or folder membership.
"""
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from schemas.bookmark import Bookmark, BookmarkCounts
from schemas.folder import Folder

RECENT_WINDOW_DAYS = 7

_OLDEST = datetime.min.replace(tzinfo=UTC)


def active_bookmarks(bookmarks: Iterable[Bookmark]) -> list[Bookmark]:
    """Non-archived bookmarks, in input order."""
    return [b for b in bookmarks if not b.is_archived]


def archived_bookmarks(bookmarks: Iterable[Bookmark]) -> list[Bookmark]:
    """Archived bookmarks, in input order."""
    return [b for b in bookmarks if b.is_archived]


def pinned_bookmarks(bookmarks: Iterable[Bookmark]) -> list[Bookmark]:
    """Pinned bookmarks among the non-archived ones."""
    return [b for b in bookmarks if b.is_pinned and not b.is_archived]


def total_count(bookmarks: Iterable[Bookmark]) -> int:
    """Number of non-archived bookmarks."""
    return len(active_bookmarks(bookmarks))


def sort_newest_first(bookmarks: Iterable[Bookmark]) -> list[Bookmark]:
    """
    Sort descending by ``date_added``.

    The sort is stable: ties keep their source order. Bookmarks without a
    date sort last.
    """
    return sorted(bookmarks, key=lambda b: b.date_added or _OLDEST, reverse=True)


def is_recent(
    bookmark: Bookmark,
    now: datetime,
    window_days: int = RECENT_WINDOW_DAYS,
) -> bool:
    """True when ``date_added`` is strictly after ``now - window_days``."""
    if bookmark.date_added is None:
        return False
    return bookmark.date_added > now - timedelta(days=window_days)


def recent_bookmarks(
    bookmarks: Iterable[Bookmark],
    now: datetime | None = None,
    window_days: int = RECENT_WINDOW_DAYS,
) -> list[Bookmark]:
    """Bookmarks added within the window, newest first. Archived ones are included."""
    now = now or datetime.now(UTC)
    recent = [b for b in bookmarks if is_recent(b, now, window_days)]
    return sort_newest_first(recent)


def recent_count(
    bookmarks: Iterable[Bookmark],
    now: datetime | None = None,
    window_days: int = RECENT_WINDOW_DAYS,
) -> int:
    """Number of bookmarks, archived included, added within the window."""
    return len(recent_bookmarks(bookmarks, now, window_days))


def tag_usage_counts(bookmarks: Iterable[Bookmark]) -> dict[str, int]:
    """Count references to each tag name across the full bookmark list."""
    counts: Counter[str] = Counter()
    for bookmark in bookmarks:
        counts.update(set(bookmark.tags))
    return dict(counts)


def folder_bookmark_counts(bookmarks: Iterable[Bookmark]) -> dict[int, int]:
    """Count bookmarks filed under each folder id across the full bookmark list."""
    return dict(Counter(b.folder_id for b in bookmarks if b.folder_id is not None))


def with_bookmark_counts(
    folders: Sequence[Folder], bookmarks: Iterable[Bookmark],
) -> list[Folder]:
    """Return copies of ``folders`` with ``bookmark_count`` derived from ``bookmarks``."""
    counts = folder_bookmark_counts(bookmarks)
    return [
        folder.model_copy(update={"bookmark_count": counts.get(folder.id, 0)})
        for folder in folders
    ]


def bookmark_counts(
    bookmarks: Sequence[Bookmark],
    now: datetime | None = None,
    window_days: int = RECENT_WINDOW_DAYS,
) -> BookmarkCounts:
    """Sidebar counts derived from the full bookmark list."""
    return BookmarkCounts(
        total=total_count(bookmarks),
        recent=recent_count(bookmarks, now, window_days),
        pinned=len(pinned_bookmarks(bookmarks)),
        archived=len(archived_bookmarks(bookmarks)),
    )
