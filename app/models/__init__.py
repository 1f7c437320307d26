"""
API models package
"""

from .schemas import (
    DestinationType,
    TransportType,
    ComfortLevel,
    TravelStyle,
    Coordinates,
    DestinationSummary,
    DestinationOut,
    DestinationCreate,
    StationIn,
    StationOut,
    TransportOptionIn,
    TransportOptionOut,
    PathCreate,
    PathOut,
    SearchHistoryCreate,
    SearchHistoryEntryOut,
    Pagination,
    SearchHistoryResponse,
    FavoriteRoute,
    HistoryStatistics,
    StatisticsResponse,
    Preferences,
    PreferencesUpdate,
    ProfileUpdate,
    UserProfile,
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    ProfileResponse,
    PreferencesResponse,
    AccountDeleteRequest,
    MessageResponse,
    ErrorResponse
)

__all__ = [
    'DestinationType',
    'TransportType',
    'ComfortLevel',
    'TravelStyle',
    'Coordinates',
    'DestinationSummary',
    'DestinationOut',
    'DestinationCreate',
    'StationIn',
    'StationOut',
    'TransportOptionIn',
    'TransportOptionOut',
    'PathCreate',
    'PathOut',
    'SearchHistoryCreate',
    'SearchHistoryEntryOut',
    'Pagination',
    'SearchHistoryResponse',
    'FavoriteRoute',
    'HistoryStatistics',
    'StatisticsResponse',
    'Preferences',
    'PreferencesUpdate',
    'ProfileUpdate',
    'UserProfile',
    'RegisterRequest',
    'LoginRequest',
    'AuthResponse',
    'ProfileResponse',
    'PreferencesResponse',
    'AccountDeleteRequest',
    'MessageResponse',
    'ErrorResponse'
]
