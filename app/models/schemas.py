"""
FastAPI Request/Response Models for the TravelPath API
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    """camelCase JSON keys; Python field names are accepted on input too"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class DestinationType(str, Enum):
    """Kinds of destination"""
    CITY = "city"
    TOWN = "town"
    VILLAGE = "village"
    LANDMARK = "landmark"


class TransportType(str, Enum):
    """Transport types a path can be travelled with"""
    TRAIN = "train"
    BUS = "bus"
    FLIGHT = "flight"
    CAR = "car"


class ComfortLevel(str, Enum):
    ECONOMY = "economy"
    COMFORT = "comfort"
    LUXURY = "luxury"


class TravelStyle(str, Enum):
    BUDGET = "budget"
    COMFORT = "comfort"
    LUXURY = "luxury"


# ---------------------- Destinations ----------------------

class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class DestinationSummary(BaseModel):
    """Autocomplete suggestion: coordinates and tags are withheld"""
    id: str
    name: str
    country: str
    type: DestinationType

    class Config:
        from_attributes = True


class DestinationOut(DestinationSummary):
    """Full destination document"""
    coordinates: Optional[Coordinates] = None
    popularity: int = Field(..., ge=0)
    tags: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": "0b6f1f2e-9d1c-4c1e-8d5b-8f6a3f2a1c11",
                "name": "Paris",
                "country": "France",
                "type": "city",
                "coordinates": {"lat": 48.8566, "lng": 2.3522},
                "popularity": 42,
                "tags": ["romantic", "museums"]
            }
        }


class DestinationCreate(BaseModel):
    """Destination as loaded by the seeding scripts"""
    name: str = Field(..., min_length=1)
    type: DestinationType
    country: str = Field(..., min_length=1)
    coordinates: Optional[Coordinates] = None
    popularity: int = Field(default=0, ge=0)
    tags: List[str] = Field(default_factory=list)

    @field_validator('name', 'country')
    @classmethod
    def strip_required_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('must not be blank')
        return v


# ---------------------- Paths ----------------------

class StationIn(CamelModel):
    """Waypoint carrying cumulative cost and distance since the origin"""
    name: str = Field(..., min_length=1)
    arrival_time: Optional[str] = None
    departure_time: Optional[str] = None
    duration: Optional[str] = None
    cost_from_start: Optional[float] = Field(default=None, ge=0)
    distance_from_start: Optional[float] = Field(default=None, ge=0)


class StationOut(StationIn):
    class Config:
        from_attributes = True


class TransportOptionIn(CamelModel):
    type: TransportType
    name: Optional[str] = None
    cost: float = Field(..., ge=0)
    duration: str = Field(..., min_length=1)
    comfort_level: ComfortLevel = ComfortLevel.COMFORT
    features: List[str] = Field(default_factory=list)


class TransportOptionOut(TransportOptionIn):
    class Config:
        from_attributes = True


class PathCreate(CamelModel):
    """Path as loaded by the seeding scripts"""
    from_location: str = Field(..., alias="from", min_length=1)
    to_location: str = Field(..., alias="to", min_length=1)
    total_distance: Optional[float] = Field(default=None, ge=0)
    total_duration: Optional[str] = None
    stations: List[StationIn] = Field(default_factory=list)
    transport_options: List[TransportOptionIn] = Field(default_factory=list)
    popularity: int = Field(default=0, ge=0)
    tags: List[str] = Field(default_factory=list)

    @field_validator('stations')
    @classmethod
    def validate_station_count(cls, v):
        """An origin and a destination at least, when stations are given"""
        if len(v) == 1:
            raise ValueError('A path needs at least 2 stations')
        return v


class PathOut(CamelModel):
    """Stored path with its ordered stations and transport options"""
    id: str
    from_location: str = Field(..., alias="from")
    to_location: str = Field(..., alias="to")
    total_distance: Optional[float] = None
    total_duration: Optional[str] = None
    stations: List[StationOut] = Field(default_factory=list)
    transport_options: List[TransportOptionOut] = Field(default_factory=list)
    popularity: int = Field(..., ge=0)
    tags: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": "7f1c2b4a-3e55-4c1a-9a51-2b1f0e9d8c77",
                "from": "Paris",
                "to": "Rome",
                "totalDistance": 1420,
                "totalDuration": "11h 30m",
                "stations": [
                    {"name": "Paris Gare de Lyon", "departureTime": "07:00", "costFromStart": 0, "distanceFromStart": 0},
                    {"name": "Milano Centrale", "arrivalTime": "14:10", "departureTime": "15:05", "costFromStart": 89, "distanceFromStart": 850},
                    {"name": "Roma Termini", "arrivalTime": "18:30", "costFromStart": 129, "distanceFromStart": 1420}
                ],
                "transportOptions": [
                    {"type": "train", "name": "TGV + Frecciarossa", "cost": 129, "duration": "11h 30m", "comfortLevel": "comfort", "features": ["wifi"]}
                ],
                "popularity": 17,
                "tags": ["scenic"]
            }
        }


# ---------------------- Search history ----------------------

class SearchHistoryCreate(CamelModel):
    """from/to are checked by the history service so blanks report a validation error"""
    from_location: Optional[str] = Field(default=None, alias="from")
    to_location: Optional[str] = Field(default=None, alias="to")

    class Config:
        json_schema_extra = {"example": {"from": "Paris", "to": "Rome"}}


class SearchHistoryEntryOut(CamelModel):
    id: str
    from_location: str = Field(..., alias="from")
    to_location: str = Field(..., alias="to")
    searched_at: datetime

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int = Field(..., description="Total number of entries in the user's history")


class SearchHistoryResponse(CamelModel):
    success: bool = True
    search_history: List[SearchHistoryEntryOut]
    pagination: Pagination


class FavoriteRoute(BaseModel):
    route: str = Field(..., examples=["Paris → Rome"])
    count: int


class HistoryStatistics(CamelModel):
    total_searches: int
    recent_searches: int = Field(..., description="Searches in the last 30 days")
    favorite_routes: List[FavoriteRoute]
    member_since: datetime
    account_age_days: int


class StatisticsResponse(BaseModel):
    success: bool = True
    statistics: HistoryStatistics


# ---------------------- Users & auth ----------------------

class Preferences(CamelModel):
    travel_style: TravelStyle = TravelStyle.COMFORT
    preferred_transport: List[TransportType] = Field(default_factory=list)


class PreferencesUpdate(CamelModel):
    travel_style: Optional[TravelStyle] = None
    preferred_transport: Optional[List[TransportType]] = None


class ProfileUpdate(PreferencesUpdate):
    name: Optional[str] = Field(default=None, min_length=2)


class UserProfile(CamelModel):
    id: str
    name: str
    email: str
    preferences: Preferences
    created_at: datetime
    updated_at: datetime


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, description="Name must be at least 2 characters long")
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters long")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: UserProfile


class ProfileResponse(BaseModel):
    success: bool = True
    user: UserProfile


class PreferencesResponse(BaseModel):
    success: bool = True
    message: str
    preferences: Preferences


class AccountDeleteRequest(BaseModel):
    confirm: bool = False


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "VALIDATION_ERROR",
                "message": "From and to parameters are required",
                "details": {
                    "missing": ["to"]
                }
            }
        }
