"""
Destination and path search endpoints
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.models import DestinationOut, DestinationSummary, PathOut, ErrorResponse
from app.core import get_db
from app.services import DestinationService, PathService

router = APIRouter(prefix="/destinations", tags=["destinations"])

STORE_ERRORS = {
    503: {"model": ErrorResponse, "description": "Data store unavailable"},
    504: {"model": ErrorResponse, "description": "Data store timed out"}
}


@router.get(
    "/search",
    response_model=List[DestinationSummary],
    status_code=status.HTTP_200_OK,
    responses=STORE_ERRORS,
    summary="Autocomplete destinations",
    description="Search destinations by name or country, most popular first"
)
async def search_destinations(
    query: Optional[str] = Query(default=None, description="At least 2 characters"),
    db: AsyncSession = Depends(get_db)
) -> List[DestinationSummary]:
    """
    - **query**: text matched against the words of destination names and countries

    Returns at most 10 suggestions. Shorter queries return an empty list.
    """
    return await DestinationService(db).search(query)


@router.get(
    "/popular",
    response_model=List[DestinationOut],
    responses=STORE_ERRORS,
    summary="Popular destinations"
)
async def popular_destinations(db: AsyncSession = Depends(get_db)) -> List[DestinationOut]:
    return await DestinationService(db).list_popular()


@router.get(
    "/paths",
    response_model=List[PathOut],
    responses={
        400: {"model": ErrorResponse, "description": "from or to missing"},
        **STORE_ERRORS
    },
    summary="Find paths",
    description="Find stored paths between two locations; every returned path gains one popularity point"
)
async def find_paths(
    from_location: Optional[str] = Query(default=None, alias="from"),
    to_location: Optional[str] = Query(default=None, alias="to"),
    transport_type: Optional[str] = Query(default=None, alias="transportType"),
    db: AsyncSession = Depends(get_db)
) -> List[PathOut]:
    """
    - **from**: text contained in the path origin (case-insensitive)
    - **to**: text contained in the path destination (case-insensitive)
    - **transportType**: train, bus, flight or car
    """
    return await PathService(db).find(from_location, to_location, transport_type)


@router.get(
    "/paths/{path_id}",
    response_model=PathOut,
    responses={
        404: {"model": ErrorResponse, "description": "Path not found"},
        **STORE_ERRORS
    },
    summary="Path details"
)
async def get_path(path_id: str, db: AsyncSession = Depends(get_db)) -> PathOut:
    return await PathService(db).get_by_id(path_id)
