"""
Destination Store - autocomplete search and popular destinations
"""
import logging
from typing import List

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Destination, DestinationToken, index_destination, tokenize
from app.core import settings, guarded
from app.models import DestinationCreate, DestinationOut, DestinationSummary
from app.services.popularity import by_popularity

logger = logging.getLogger(__name__)


class DestinationService:
    """
    Searches the destination catalog through its token index.
    Searching never changes popularity.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(self, query_text: str) -> List[DestinationSummary]:
        """
        Autocomplete destinations by name or country.

        Args:
            query_text: Free text typed by the user

        Returns:
            Up to DESTINATION_SEARCH_LIMIT suggestions, most popular first.
            Queries shorter than MIN_QUERY_LENGTH return [] without a store call.
        """
        query_text = (query_text or "").strip()
        if len(query_text) < settings.MIN_QUERY_LENGTH:
            return []

        tokens = tokenize(query_text)
        if not tokens:
            return []

        destinations = await guarded("search_destinations", self._search(tokens))
        return [DestinationSummary.model_validate(d) for d in destinations]

    async def _search(self, tokens: List[str]) -> List[Destination]:
        """
        A destination matches when any query token prefixes one of its index tokens.
        """
        matching_ids = (
            select(DestinationToken.destination_id)
            .where(or_(*[
                DestinationToken.token.startswith(token, autoescape=True)
                for token in tokens
            ]))
        )

        result = await self.db.execute(
            select(Destination)
            .where(Destination.id.in_(matching_ids))
            .order_by(*by_popularity(Destination))
            .limit(settings.DESTINATION_SEARCH_LIMIT)
        )
        return list(result.scalars().all())

    async def list_popular(self) -> List[DestinationOut]:
        """Full documents of the most popular destinations"""
        destinations = await guarded("popular_destinations", self._list_popular())
        return [DestinationOut.model_validate(d) for d in destinations]

    async def _list_popular(self) -> List[Destination]:
        result = await self.db.execute(
            select(Destination)
            .order_by(*by_popularity(Destination))
            .limit(settings.POPULAR_DESTINATIONS_LIMIT)
        )
        return list(result.scalars().all())

    async def create(self, data: DestinationCreate) -> DestinationOut:
        """Insert a destination and its index tokens"""
        destination = await guarded("create_destination", self._create(data))
        logger.info("Created destination %s (%s)", destination.name, destination.id)
        return DestinationOut.model_validate(destination)

    async def _create(self, data: DestinationCreate) -> Destination:
        destination = Destination(
            name=data.name,
            type=data.type.value,
            country=data.country,
            latitude=data.coordinates.lat if data.coordinates else None,
            longitude=data.coordinates.lng if data.coordinates else None,
            popularity=data.popularity,
            tags=list(data.tags)
        )
        index_destination(destination)
        self.db.add(destination)
        await self.db.commit()
        return destination
