"""
Service layer: destination, path, search history and account operations
"""

from .destination_service import DestinationService
from .path_service import PathService
from .history_service import SearchHistoryService
from .user_service import UserService, sign_token, verify_token

__all__ = [
    'DestinationService',
    'PathService',
    'SearchHistoryService',
    'UserService',
    'sign_token',
    'verify_token'
]
