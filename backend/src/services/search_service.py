"""
Client-side text filtering for bookmark lists.

A plain case-insensitive substring filter: no tokenization, fuzzy matching
or scoring. Matching entities keep their original relative order.
"""
from collections.abc import Sequence
from typing import Protocol, TypeVar


class Searchable(Protocol):
    """Fields consulted by the text filter."""

    title: str | None
    url: str | None
    description: str | None
    tags: list[str] | None


S = TypeVar("S", bound=Searchable)


def _contains(value: str | None, needle: str) -> bool:
    return value is not None and needle in value.lower()


def matches_query(entity: Searchable, needle: str) -> bool:
    """
    Check whether an entity matches an already lower-cased query.

    A match on title, url, description or any tag name includes the entity.
    Missing fields simply do not match.
    """
    if _contains(entity.title, needle):
        return True
    if _contains(entity.url, needle):
        return True
    if _contains(entity.description, needle):
        return True
    return any(_contains(tag, needle) for tag in entity.tags or [])


def filter_bookmarks(entities: Sequence[S], query: str | None) -> list[S]:
    """
    Return the entities matching ``query``.

    An empty or whitespace-only query returns the full input unchanged.
    """
    if query is None or not query.strip():
        return list(entities)
    needle = query.lower()
    return [entity for entity in entities if matches_query(entity, needle)]
