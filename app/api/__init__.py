"""
API routes package
"""

from fastapi import APIRouter
from .auth import router as auth_router
from .destinations import router as destinations_router
from .users import router as users_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(destinations_router)
api_router.include_router(users_router)

__all__ = ['api_router']
