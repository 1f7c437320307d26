"""
Popularity ranking policy shared by destinations and paths.

Every list query orders by popularity first, and every retrieval that counts
as a searcher choosing a record bumps its counter by exactly one.
"""
from typing import Iterable, List

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession


def by_popularity(model) -> List:
    """
    Ordering clause: most popular first, insertion order among equals.
    """
    return [model.popularity.desc(), model.created_at.asc()]


async def increment_popularity(db: AsyncSession, model, ids: Iterable[str]) -> int:
    """
    Increment popularity of every record in `ids` by one.

    Issued as a single UPDATE ... SET popularity = popularity + 1 so
    concurrent searches never lose an increment.

    Returns:
        Number of rows incremented
    """
    ids = list(ids)
    if not ids:
        return 0

    result = await db.execute(
        update(model)
        .where(model.id.in_(ids))
        .values(popularity=model.popularity + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
