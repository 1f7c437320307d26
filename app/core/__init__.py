"""
Core settings, errors and database access
"""

from .config import settings
from .database import get_db, guarded
from .errors import (
    TravelPathError,
    ValidationError,
    AuthenticationError,
    NotFoundError,
    StoreUnavailableError,
    StoreTimeoutError
)

__all__ = [
    'settings',
    'get_db',
    'guarded',
    'TravelPathError',
    'ValidationError',
    'AuthenticationError',
    'NotFoundError',
    'StoreUnavailableError',
    'StoreTimeoutError'
]
