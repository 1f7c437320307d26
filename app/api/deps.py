"""
Shared route dependencies
"""

from typing import Optional

from fastapi import Header

from app.core import AuthenticationError
from app.services import verify_token


def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """
    Resolve the user id from an "Authorization: Bearer <token>" header
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise AuthenticationError("Missing token")
    token = authorization.split(" ", 1)[1].strip()
    return verify_token(token)
