"""
Service layer for tag operations.

Tags are identified by name (case-sensitive) and carry a stored usage count.
A tag exists only while at least one bookmark references it: crediting an
unknown name creates it with a count of 1, and debiting a count to zero
deletes it. All bookmark tag changes go through ``apply_tag_changes`` so that
credits and debits stay symmetric.
"""
import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from records.base import TAG_TABLE, FetchParams, WhereCondition
from schemas.bookmark import Bookmark
from schemas.tag import Tag, TagCreate, TagReconcileResponse
from services.aggregates import tag_usage_counts
from services.base_entity_service import BaseEntityService
from services.exceptions import NotFoundError
from services.normalizer import normalize_tag, to_tag_record
from services.utils import coerce_payload

logger = logging.getLogger(__name__)


class TagService(BaseEntityService[Tag]):
    """CRUD and usage-count bookkeeping for tags."""

    table = TAG_TABLE
    entity_name = "Tag"
    fields = ["Name", "name_c", "color_c", "usage_count_c"]

    def _normalize(self, record: Mapping[str, Any]) -> Tag:
        return normalize_tag(record)

    def _to_record(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return to_tag_record(values)

    async def get_all(self) -> list[Tag]:
        """All tags sorted by usage count descending, then name."""
        tags = await self._fetch()
        return sorted(tags, key=lambda t: (-t.usage_count, t.name))

    async def get_by_name(self, name: str) -> Tag | None:
        """
        Get a tag by exact (case-sensitive) name.

        Returns:
            The tag, or None if it does not exist or the store failed.
        """
        return _exact(await self._fetch(self._by_name(name)), name)

    def _by_name(self, name: str) -> FetchParams:
        return self._params(where=[WhereCondition(field_name="name_c", values=[name])])

    async def _lookup(self, name: str) -> Tag | None:
        """Find a tag by name on a write path (store failures raise)."""
        candidates = await self._fetch_strict(self._by_name(name), f"look up tag '{name}'")
        return _exact(candidates, name)

    async def create(self, data: TagCreate | Mapping[str, Any]) -> Tag:
        """
        Create a tag with a usage count of 1.

        If a tag with the same name exists it is returned unchanged.

        Raises:
            ValidationError: If the name or color is invalid.
        """
        payload = coerce_payload(TagCreate, data, self.settings)
        existing = await self._lookup(payload.name)
        if existing is not None:
            return existing
        return await self._create(
            {"name": payload.name, "color": payload.color, "usage_count": 1},
        )

    async def credit(self, name: str) -> Tag:
        """Increment a tag's usage count, creating the tag at 1 if absent."""
        existing = await self._lookup(name)
        if existing is None:
            return await self._create(
                {"name": name, "color": self.settings.default_color, "usage_count": 1},
            )
        return await self._update(existing, {"usage_count": existing.usage_count + 1})

    async def debit(self, name: str) -> Tag | None:
        """
        Decrement a tag's usage count.

        Returns:
            The updated tag, or None if the tag was removed (count reached
            zero) or did not exist.
        """
        existing = await self._lookup(name)
        if existing is None:
            logger.warning("Debit for unknown tag '%s' ignored", name)
            return None
        remaining = existing.usage_count - 1
        if remaining <= 0:
            await self._delete_existing(existing)
            return None
        return await self._update(existing, {"usage_count": remaining})

    async def apply_tag_changes(
        self, old_tags: Sequence[str], new_tags: Sequence[str],
    ) -> None:
        """
        Credit names added and debit names removed between two tag sets.

        This is the single entry point bookmark mutations use for tag
        bookkeeping. Each credit/debit is its own read-modify-write; there is
        no transaction across them.
        """
        old_set = set(old_tags)
        new_set = set(new_tags)
        for name in _ordered(new_tags):
            if name not in old_set:
                await self.credit(name)
        for name in _ordered(old_tags):
            if name not in new_set:
                await self.debit(name)

    async def delete(self, name: str) -> None:
        """
        Delete a tag by name. Bookmarks referencing it are not modified.

        Raises:
            NotFoundError: If no tag has this name.
        """
        existing = await self._lookup(name)
        if existing is None:
            raise NotFoundError(self.entity_name, name)
        await self._delete_existing(existing)

    async def reconcile_usage(self, bookmarks: Iterable[Bookmark]) -> TagReconcileResponse:
        """
        Rewrite stored usage counts from the bookmark list.

        Tags no bookmark references are removed; referenced names with no tag
        record are created; drifted counts are corrected.
        """
        derived = tag_usage_counts(bookmarks)
        stored = {
            tag.name: tag for tag in await self._fetch_strict(self._params(), "load tags")
        }
        summary = TagReconcileResponse(created=[], updated=[], removed=[])

        for name, tag in stored.items():
            count = derived.get(name, 0)
            if count <= 0:
                await self._delete_existing(tag)
                summary.removed.append(name)
            elif count != tag.usage_count:
                await self._update(tag, {"usage_count": count})
                summary.updated.append(name)

        for name, count in derived.items():
            if name not in stored:
                await self._create(
                    {"name": name, "color": self.settings.default_color, "usage_count": count},
                )
                summary.created.append(name)

        logger.info(
            "Reconciled tags: %d created, %d updated, %d removed",
            len(summary.created), len(summary.updated), len(summary.removed),
        )
        return summary

    async def _delete_existing(self, tag: Tag) -> None:
        if tag.id is None:
            raise NotFoundError(self.entity_name, tag.name)
        await self._delete(tag.id)


def _exact(candidates: Iterable[Tag], name: str) -> Tag | None:
    """Pick the case-sensitive match; the store's equality may ignore case."""
    for tag in candidates:
        if tag.name == name:
            return tag
    return None


def _ordered(names: Iterable[str]) -> list[str]:
    """De-duplicate names preserving first occurrence."""
    return list(dict.fromkeys(names))
