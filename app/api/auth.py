"""
Account endpoints: register, login, profile
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import (
    AuthResponse, ErrorResponse, LoginRequest, ProfileResponse, RegisterRequest
)
from app.core import get_db
from app.services import UserService, sign_token
from .deps import get_current_user_id

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Invalid data or email taken"}},
    summary="Create an account"
)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)) -> AuthResponse:
    user = await UserService(db).register(request.name, request.email, request.password)
    return AuthResponse(token=sign_token(user.id), user=user)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Log in"
)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)) -> AuthResponse:
    user = await UserService(db).login(request.email, request.password)
    return AuthResponse(token=sign_token(user.id), user=user)


@router.get("/profile", response_model=ProfileResponse, summary="Current user")
async def profile(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
) -> ProfileResponse:
    return ProfileResponse(user=await UserService(db).get_profile(user_id))
