"""
Path Store - from/to lookup over stored paths with popularity ranking
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Path, Station, TransportOption
from app.core import settings, guarded, NotFoundError, ValidationError
from app.models import PathCreate, PathOut, TransportType
from app.services.popularity import by_popularity, increment_popularity

logger = logging.getLogger(__name__)


class PathService:
    """
    Handles lookup of stored paths.

    Every path handed back to a searcher has its popularity
    incremented by one.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find(
        self,
        from_location: Optional[str],
        to_location: Optional[str],
        transport_type: Optional[str] = None
    ) -> List[PathOut]:
        """
        Find paths whose endpoints contain the given texts.

        Args:
            from_location: Text contained in the path origin
            to_location: Text contained in the path destination
            transport_type: Optional transport type at least one option must have

        Returns:
            Up to PATH_SEARCH_LIMIT paths, most popular first, as they were
            before this search incremented them
        """
        from_location = (from_location or "").strip()
        to_location = (to_location or "").strip()
        missing = [
            name for name, value in (("from", from_location), ("to", to_location))
            if not value
        ]
        if missing:
            raise ValidationError(
                "From and to parameters are required",
                details={"missing": missing}
            )

        if transport_type:
            try:
                transport_type = TransportType(transport_type.strip().lower()).value
            except ValueError:
                raise ValidationError(
                    f"Unknown transport type '{transport_type}'",
                    details={"allowed": [t.value for t in TransportType]}
                )

        return await guarded(
            "find_paths",
            self._find(from_location, to_location, transport_type or None)
        )

    async def _find(
        self,
        from_location: str,
        to_location: str,
        transport_type: Optional[str]
    ) -> List[PathOut]:
        query = select(Path).where(
            Path.from_location.icontains(from_location, autoescape=True),
            Path.to_location.icontains(to_location, autoescape=True)
        )

        if transport_type:
            query = query.where(
                Path.transport_options.any(TransportOption.type == transport_type)
            )

        result = await self.db.execute(
            query.order_by(*by_popularity(Path)).limit(settings.PATH_SEARCH_LIMIT)
        )
        paths = [PathOut.model_validate(p) for p in result.scalars().all()]

        if paths:
            await increment_popularity(self.db, Path, [p.id for p in paths])
            await self.db.commit()

        logger.info(
            "Path search %s -> %s (transport=%s) returned %d paths",
            from_location, to_location, transport_type, len(paths)
        )
        return paths

    async def get_by_id(self, path_id: str) -> PathOut:
        """
        Fetch one path, counting the view.

        Raises:
            NotFoundError: no path has this id (nothing is modified)
        """
        return await guarded("get_path", self._get_by_id(path_id))

    async def _get_by_id(self, path_id: str) -> PathOut:
        updated = await increment_popularity(self.db, Path, [path_id])
        if not updated:
            await self.db.rollback()
            raise NotFoundError("Path not found", details={"id": path_id})

        result = await self.db.execute(
            select(Path)
            .where(Path.id == path_id)
            .execution_options(populate_existing=True)
        )
        path = PathOut.model_validate(result.scalar_one())
        await self.db.commit()
        return path

    async def create(self, data: PathCreate) -> PathOut:
        """Insert a path with its ordered stations and transport options"""
        path = await guarded("create_path", self._create(data))
        logger.info("Created path %s -> %s (%s)", path.from_location, path.to_location, path.id)
        return path

    async def _create(self, data: PathCreate) -> PathOut:
        path = Path(
            from_location=data.from_location.strip(),
            to_location=data.to_location.strip(),
            total_distance=data.total_distance,
            total_duration=data.total_duration,
            popularity=data.popularity,
            tags=list(data.tags),
            stations=[
                Station(position=position, **station.model_dump())
                for position, station in enumerate(data.stations)
            ],
            transport_options=[
                TransportOption(
                    position=position,
                    type=option.type.value,
                    name=option.name,
                    cost=option.cost,
                    duration=option.duration,
                    comfort_level=option.comfort_level.value,
                    features=list(option.features)
                )
                for position, option in enumerate(data.transport_options)
            ]
        )
        self.db.add(path)
        await self.db.commit()
        return PathOut.model_validate(path)
