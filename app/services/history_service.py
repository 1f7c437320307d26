"""
Search History Manager - per-user, size-bounded, deduplicating log of searches
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import SearchHistoryEntry, User, utcnow
from app.core import settings, guarded, NotFoundError, ValidationError
from app.models import (
    FavoriteRoute, HistoryStatistics, Pagination,
    SearchHistoryEntryOut, SearchHistoryResponse
)
from app.services.user_locks import user_lock

logger = logging.getLogger(__name__)


def route_key(from_location: str, to_location: str) -> str:
    return f"{from_location} → {to_location}"


def newest_first():
    """Most recent search first; later insertions first among equal timestamps"""
    return [SearchHistoryEntry.searched_at.desc(), SearchHistoryEntry.sequence.desc()]


def same_route(entry: SearchHistoryEntry, from_location: str, to_location: str) -> bool:
    return (
        entry.from_location.casefold() == from_location.casefold()
        and entry.to_location.casefold() == to_location.casefold()
    )


class SearchHistoryService:
    """
    Keeps the newest HISTORY_MAX_ENTRIES searches of each user.

    Repeating a from/to search inside the dedup window refreshes the
    existing entry instead of appending a new one.
    """

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    async def _require_user(self, user_id: str) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found", details={"user_id": user_id})
        return user

    # ---------------------- Recording ----------------------

    async def record_search(
        self,
        user_id: str,
        from_location: Optional[str],
        to_location: Optional[str]
    ) -> Tuple[SearchHistoryEntryOut, bool]:
        """
        Remember a from/to search.

        Returns:
            The stored entry and whether it was newly created (False when
            an entry inside the dedup window was refreshed)
        """
        from_location = (from_location or "").strip()
        to_location = (to_location or "").strip()
        missing = [
            name for name, value in (("from", from_location), ("to", to_location))
            if not value
        ]
        if missing:
            raise ValidationError(
                "From and to locations are required",
                details={"missing": missing}
            )

        return await guarded(
            "record_search",
            self._record_locked(user_id, from_location, to_location)
        )

    async def _record_locked(self, user_id: str, from_location: str, to_location: str):
        # Serialized per user so the duplicate check and the append can't interleave
        async with user_lock(user_id):
            return await self._record(user_id, from_location, to_location)

    async def _record(
        self,
        user_id: str,
        from_location: str,
        to_location: str
    ) -> Tuple[SearchHistoryEntryOut, bool]:
        await self._require_user(user_id)
        now = self.clock()
        cutoff = now - timedelta(seconds=settings.HISTORY_DEDUP_WINDOW_SECONDS)

        result = await self.db.execute(
            select(SearchHistoryEntry)
            .where(
                SearchHistoryEntry.user_id == user_id,
                SearchHistoryEntry.searched_at > cutoff
            )
            .order_by(SearchHistoryEntry.searched_at.desc())
        )
        duplicate = next(
            (e for e in result.scalars().all() if same_route(e, from_location, to_location)),
            None
        )

        if duplicate is not None:
            duplicate.searched_at = now
            await self.db.commit()
            logger.debug("Refreshed history entry %s for user %s", duplicate.id, user_id)
            return SearchHistoryEntryOut.model_validate(duplicate), False

        last_sequence = await self.db.scalar(
            select(func.max(SearchHistoryEntry.sequence))
            .where(SearchHistoryEntry.user_id == user_id)
        )
        entry = SearchHistoryEntry(
            user_id=user_id,
            from_location=from_location,
            to_location=to_location,
            searched_at=now,
            sequence=(last_sequence or 0) + 1
        )
        self.db.add(entry)
        await self.db.flush()

        evicted = await self._trim(user_id)
        await self.db.commit()
        if evicted:
            logger.debug("Evicted %d old history entries for user %s", evicted, user_id)
        return SearchHistoryEntryOut.model_validate(entry), True

    async def _trim(self, user_id: str) -> int:
        """
        Delete everything older than the newest HISTORY_MAX_ENTRIES entries.
        """
        overflow = (
            select(SearchHistoryEntry.id)
            .where(SearchHistoryEntry.user_id == user_id)
            .order_by(*newest_first())
            .offset(settings.HISTORY_MAX_ENTRIES)
        )
        overflow_ids = list((await self.db.execute(overflow)).scalars().all())
        if not overflow_ids:
            return 0

        await self.db.execute(
            delete(SearchHistoryEntry)
            .where(SearchHistoryEntry.id.in_(overflow_ids))
            .execution_options(synchronize_session=False)
        )
        return len(overflow_ids)

    # ---------------------- Reading ----------------------

    async def list_history(
        self,
        user_id: str,
        page: int = 1,
        limit: int = settings.HISTORY_DEFAULT_PAGE_SIZE
    ) -> SearchHistoryResponse:
        """
        One page of a user's history, newest first.
        Pages are 1-indexed: skip = (page - 1) * limit.
        """
        if page < 1:
            raise ValidationError("page must be at least 1", details={"page": page})
        if limit < 1 or limit > settings.HISTORY_MAX_ENTRIES:
            raise ValidationError(
                f"limit must be between 1 and {settings.HISTORY_MAX_ENTRIES}",
                details={"limit": limit}
            )

        return await guarded("list_history", self._list_history(user_id, page, limit))

    async def _list_history(self, user_id: str, page: int, limit: int) -> SearchHistoryResponse:
        await self._require_user(user_id)

        total = await self.db.scalar(
            select(func.count())
            .select_from(SearchHistoryEntry)
            .where(SearchHistoryEntry.user_id == user_id)
        )
        result = await self.db.execute(
            select(SearchHistoryEntry)
            .where(SearchHistoryEntry.user_id == user_id)
            .order_by(*newest_first())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        entries = sorted(result.scalars().all(), key=lambda e: (e.searched_at, e.sequence), reverse=True)

        return SearchHistoryResponse(
            search_history=[SearchHistoryEntryOut.model_validate(e) for e in entries],
            pagination=Pagination(page=page, limit=limit, total=total or 0)
        )

    # ---------------------- Removal ----------------------

    async def delete_entry(self, user_id: str, entry_id: str) -> bool:
        """
        Remove one entry. A missing entry is not an error.

        Returns:
            Whether an entry was removed
        """
        return await guarded("delete_history_entry", self._delete_entry(user_id, entry_id))

    async def _delete_entry(self, user_id: str, entry_id: str) -> bool:
        await self._require_user(user_id)
        result = await self.db.execute(
            delete(SearchHistoryEntry)
            .where(
                SearchHistoryEntry.id == entry_id,
                SearchHistoryEntry.user_id == user_id
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def clear(self, user_id: str) -> int:
        """Remove every entry of the user, returning how many were removed"""
        return await guarded("clear_history", self._clear(user_id))

    async def _clear(self, user_id: str) -> int:
        await self._require_user(user_id)
        result = await self.db.execute(
            delete(SearchHistoryEntry)
            .where(SearchHistoryEntry.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        logger.info("Cleared %d history entries for user %s", result.rowcount, user_id)
        return result.rowcount

    # ---------------------- Statistics ----------------------

    async def statistics(self, user_id: str) -> HistoryStatistics:
        return await guarded("history_statistics", self._statistics(user_id))

    async def _statistics(self, user_id: str) -> HistoryStatistics:
        user = await self._require_user(user_id)
        result = await self.db.execute(
            select(SearchHistoryEntry)
            .where(SearchHistoryEntry.user_id == user_id)
            .order_by(SearchHistoryEntry.searched_at.asc(), SearchHistoryEntry.sequence.asc())
        )
        entries = result.scalars().all()
        now = self.clock()

        recent_cutoff = now - timedelta(days=settings.RECENT_ACTIVITY_DAYS)
        recent = sum(1 for e in entries if e.searched_at > recent_cutoff)

        # dicts keep first-seen order and sorted() is stable, so equal counts stay in that order
        route_counts: Dict[str, int] = {}
        for e in entries:
            key = route_key(e.from_location, e.to_location)
            route_counts[key] = route_counts.get(key, 0) + 1
        favorites = sorted(route_counts.items(), key=lambda item: item[1], reverse=True)

        member_since = user.created_at or now
        return HistoryStatistics(
            total_searches=len(entries),
            recent_searches=recent,
            favorite_routes=[
                FavoriteRoute(route=route, count=count)
                for route, count in favorites[:settings.FAVORITE_ROUTES_LIMIT]
            ],
            member_since=member_since,
            account_age_days=max((now - member_since).days, 0)
        )
