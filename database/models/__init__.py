"""
Database models package
"""

from .schema import (
    Base,
    Destination,
    DestinationToken,
    Path,
    Station,
    TransportOption,
    User,
    SearchHistoryEntry,
    index_destination,
    tokenize,
    utcnow
)

__all__ = [
    'Base',
    'Destination',
    'DestinationToken',
    'Path',
    'Station',
    'TransportOption',
    'User',
    'SearchHistoryEntry',
    'index_destination',
    'tokenize',
    'utcnow'
]
