"""
Error kinds raised by the services and rendered by the API layer
"""

from typing import Optional


class TravelPathError(Exception):
    """Base error: carries a machine readable code and an HTTP status"""

    error = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "error": self.error,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(TravelPathError):
    """Missing or malformed input, detected before any store access"""
    error = "VALIDATION_ERROR"
    status_code = 400


class AuthenticationError(TravelPathError):
    error = "UNAUTHORIZED"
    status_code = 401


class NotFoundError(TravelPathError):
    """Referenced path or user does not exist"""
    error = "NOT_FOUND"
    status_code = 404


class StoreUnavailableError(TravelPathError):
    """The database could not be reached"""
    error = "STORE_UNAVAILABLE"
    status_code = 503


class StoreTimeoutError(TravelPathError):
    """A store operation exceeded STORE_TIMEOUT_SECONDS"""
    error = "TIMEOUT"
    status_code = 504
