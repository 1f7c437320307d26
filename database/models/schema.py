"""
Database models for the TravelPath route discovery service
Destinations, stored paths and users with their search history
"""

from sqlalchemy import (
    Column, String, Integer, Float, DateTime, ForeignKey,
    Index, UniqueConstraint, JSON, CheckConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime, timezone
import re
import uuid

Base = declarative_base()

# letters and digits of any script; underscores split words
TOKEN_PATTERN = re.compile(r"[^\W_]+")


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


def tokenize(text: str) -> list:
    """Case-folded alphanumeric words of `text`, in order, without repeats"""
    seen = []
    for token in TOKEN_PATTERN.findall((text or "").casefold()):
        if token not in seen:
            seen.append(token)
    return seen


class Destination(Base):
    """
    A place users can search for: city, town, village or landmark
    """
    __tablename__ = 'destinations'

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # city, town, village, landmark
    country = Column(String(100), nullable=False)
    latitude = Column(Float)
    longitude = Column(Float)
    popularity = Column(Integer, nullable=False, default=0)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow)

    tokens = relationship(
        "DestinationToken",
        back_populates="destination",
        cascade="all, delete-orphan",
        lazy="select"
    )

    __table_args__ = (
        CheckConstraint("popularity >= 0", name='ck_destination_popularity'),
        Index('idx_destination_popularity', 'popularity'),
    )

    @property
    def coordinates(self):
        if self.latitude is None or self.longitude is None:
            return None
        return {"lat": self.latitude, "lng": self.longitude}

    def __repr__(self):
        return f"<Destination(name='{self.name}', country='{self.country}', popularity={self.popularity})>"


class DestinationToken(Base):
    """
    Inverted index entry: one word of a destination's name or country
    """
    __tablename__ = 'destination_tokens'

    token = Column(String(100), primary_key=True)
    destination_id = Column(
        String(36),
        ForeignKey('destinations.id', ondelete='CASCADE'),
        primary_key=True
    )

    destination = relationship("Destination", back_populates="tokens")

    __table_args__ = (
        Index('idx_destination_token_destination', 'destination_id'),
    )

    def __repr__(self):
        return f"<DestinationToken(token='{self.token}', destination_id='{self.destination_id}')>"


def index_destination(destination: Destination) -> None:
    """
    Build the token index entries for a new destination from its name and country
    """
    words = tokenize(destination.name) + tokenize(destination.country)
    destination.tokens = [
        DestinationToken(token=token)
        for token in dict.fromkeys(words)
    ]


class Path(Base):
    """
    A stored route between two free-text locations.
    from/to are not foreign keys into destinations.
    """
    __tablename__ = 'paths'

    id = Column(String(36), primary_key=True, default=new_id)
    from_location = Column('from', String(255), nullable=False)
    to_location = Column('to', String(255), nullable=False)
    total_distance = Column(Float)
    total_duration = Column(String(50))
    popularity = Column(Integer, nullable=False, default=0)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    stations = relationship(
        "Station",
        order_by="Station.position",
        cascade="all, delete-orphan",
        lazy="selectin"
    )
    transport_options = relationship(
        "TransportOption",
        order_by="TransportOption.position",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    __table_args__ = (
        CheckConstraint("popularity >= 0", name='ck_path_popularity'),
        Index('idx_path_popularity', 'popularity'),
    )

    def __repr__(self):
        return f"<Path(from='{self.from_location}', to='{self.to_location}', popularity={self.popularity})>"


class Station(Base):
    """
    A waypoint of a path. position 0 is the origin, the last one the destination.
    """
    __tablename__ = 'stations'

    id = Column(String(36), primary_key=True, default=new_id)
    path_id = Column(String(36), ForeignKey('paths.id', ondelete='CASCADE'), nullable=False)
    position = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    arrival_time = Column(String(50))
    departure_time = Column(String(50))
    duration = Column(String(50))
    cost_from_start = Column(Float)
    distance_from_start = Column(Float)

    __table_args__ = (
        UniqueConstraint('path_id', 'position', name='uq_station_path_position'),
    )

    def __repr__(self):
        return f"<Station(name='{self.name}', position={self.position})>"


class TransportOption(Base):
    """
    One way of travelling a path, with its cost and comfort level
    """
    __tablename__ = 'transport_options'

    id = Column(String(36), primary_key=True, default=new_id)
    path_id = Column(String(36), ForeignKey('paths.id', ondelete='CASCADE'), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    type = Column(String(20), nullable=False)  # train, bus, flight, car
    name = Column(String(255))
    cost = Column(Float, nullable=False)
    duration = Column(String(50), nullable=False)
    comfort_level = Column(String(20), nullable=False, default='comfort')
    features = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("cost >= 0", name='ck_transport_option_cost'),
        Index('idx_transport_option_path_type', 'path_id', 'type'),
    )

    def __repr__(self):
        return f"<TransportOption(type='{self.type}', cost={self.cost})>"


class User(Base):
    """
    Account with travel preferences and an embedded search history
    """
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(128), nullable=False)
    password_salt = Column(String(64), nullable=False)

    # Preferences
    travel_style = Column(String(20), nullable=False, default='comfort')  # budget, comfort, luxury
    preferred_transport = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    search_history = relationship(
        "SearchHistoryEntry",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise"
    )

    def __repr__(self):
        return f"<User(email='{self.email}', name='{self.name}')>"


class SearchHistoryEntry(Base):
    """
    One remembered from/to search of a user
    """
    __tablename__ = 'search_history'

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    from_location = Column('from', String(255), nullable=False)
    to_location = Column('to', String(255), nullable=False)
    searched_at = Column(DateTime, nullable=False, default=utcnow)
    # per-user insertion counter, orders entries with equal searched_at
    sequence = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="search_history")

    __table_args__ = (
        Index('idx_search_history_user_searched', 'user_id', 'searched_at'),
    )

    def __repr__(self):
        return f"<SearchHistoryEntry(from='{self.from_location}', to='{self.to_location}', searched_at='{self.searched_at}')>"
