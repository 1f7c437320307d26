"""
Per-user endpoints: profile, preferences, search history and statistics
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import (
    AccountDeleteRequest, ErrorResponse, MessageResponse, PreferencesResponse,
    PreferencesUpdate, ProfileResponse, ProfileUpdate, SearchHistoryCreate,
    SearchHistoryResponse, StatisticsResponse
)
from app.core import get_db, settings
from app.services import SearchHistoryService, UserService
from .deps import get_current_user_id

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        404: {"model": ErrorResponse, "description": "User not found"}
    }
)


# ---------------------- Profile & preferences ----------------------

@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> ProfileResponse:
    return ProfileResponse(user=await UserService(db).get_profile(user_id))


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    changes: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> ProfileResponse:
    return ProfileResponse(user=await UserService(db).update_profile(user_id, changes))


@router.patch("/preferences", response_model=PreferencesResponse)
async def update_preferences(
    changes: PreferencesUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> PreferencesResponse:
    user = await UserService(db).update_preferences(user_id, changes)
    return PreferencesResponse(message="Preferences updated successfully", preferences=user.preferences)


@router.delete("/account", response_model=MessageResponse)
async def delete_account(
    request: AccountDeleteRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    await UserService(db).delete_account(user_id, request.confirm)
    return MessageResponse(message="Account deleted successfully")


# ---------------------- Search history ----------------------

@router.get("/search-history", response_model=SearchHistoryResponse)
async def list_search_history(
    page: int = Query(default=1),
    limit: int = Query(default=settings.HISTORY_DEFAULT_PAGE_SIZE),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> SearchHistoryResponse:
    """Newest first; pages are 1-indexed"""
    return await SearchHistoryService(db).list_history(user_id, page, limit)


@router.post("/search-history", response_model=MessageResponse)
async def record_search(
    search: SearchHistoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    await SearchHistoryService(db).record_search(user_id, search.from_location, search.to_location)
    return MessageResponse(message="Search added to history")


@router.delete("/search-history", response_model=MessageResponse)
async def clear_search_history(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    await SearchHistoryService(db).clear(user_id)
    return MessageResponse(message="Search history cleared successfully")


@router.delete("/search-history/{entry_id}", response_model=MessageResponse)
async def delete_search_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    await SearchHistoryService(db).delete_entry(user_id, entry_id)
    return MessageResponse(message="Search removed from history")


@router.get("/statistics", response_model=StatisticsResponse)
async def statistics(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> StatisticsResponse:
    return StatisticsResponse(statistics=await SearchHistoryService(db).statistics(user_id))
