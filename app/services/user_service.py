"""
User accounts: registration, login tokens, profile and travel preferences
"""
import base64
import hashlib
import hmac
import json
import logging
import os
import time
from typing import Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import SearchHistoryEntry, User
from app.core import settings, guarded, AuthenticationError, NotFoundError, ValidationError
from app.models import (
    Preferences, PreferencesUpdate, ProfileUpdate, UserProfile
)

logger = logging.getLogger(__name__)


# ---------------------- Passwords & tokens ----------------------

def hash_password(password: str, salt: Optional[str] = None) -> Dict[str, str]:
    salt_bytes = os.urandom(16) if salt is None else base64.b64decode(salt)
    hashed = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt_bytes, settings.PASSWORD_HASH_ITERATIONS
    )
    return {
        "salt": base64.b64encode(salt_bytes).decode(),
        "hash": base64.b64encode(hashed).decode(),
    }


def verify_password(password: str, salt: str, stored_hash: str) -> bool:
    calc = hash_password(password, salt)
    return hmac.compare_digest(calc["hash"], stored_hash)


def _signature(data: str) -> str:
    return hmac.new(settings.AUTH_SECRET.encode(), data.encode(), hashlib.sha256).hexdigest()


def sign_token(user_id: str, ttl_seconds: Optional[int] = None) -> str:
    """Bearer token: base64url(json payload) + "." + hex HMAC-SHA256"""
    ttl = settings.TOKEN_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    payload = {"user_id": user_id, "exp": int(time.time()) + ttl}
    data = base64.urlsafe_b64encode(json.dumps(payload, separators=(",", ":")).encode()).decode()
    return f"{data}.{_signature(data)}"


def verify_token(token: str) -> str:
    """
    Check signature and expiry of a token.

    Returns:
        The user id the token was issued for

    Raises:
        AuthenticationError: malformed, forged or expired token
    """
    try:
        data, sig = token.split(".")
    except ValueError:
        raise AuthenticationError("Invalid token")

    if not hmac.compare_digest(sig, _signature(data)):
        raise AuthenticationError("Invalid token")

    try:
        payload = json.loads(base64.urlsafe_b64decode(data.encode()))
    except ValueError:
        raise AuthenticationError("Invalid token")

    user_id = payload.get("user_id")
    if not user_id:
        raise AuthenticationError("Invalid token payload")
    if payload.get("exp", 0) < time.time():
        raise AuthenticationError("Token expired")
    return user_id


def to_profile(user: User) -> UserProfile:
    return UserProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        preferences=Preferences(
            travel_style=user.travel_style,
            preferred_transport=user.preferred_transport or []
        ),
        created_at=user.created_at,
        updated_at=user.updated_at
    )


class UserService:
    """
    Account management. Credential checks happen here; every other
    service trusts the user id it is handed.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require_user(self, user_id: str) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found", details={"user_id": user_id})
        return user

    async def register(self, name: str, email: str, password: str) -> UserProfile:
        return await guarded("register", self._register(name.strip(), email.strip().lower(), password))

    async def _register(self, name: str, email: str, password: str) -> UserProfile:
        existing = await self.db.scalar(select(User.id).where(User.email == email))
        if existing:
            raise ValidationError("Email already registered", details={"email": email})

        creds = hash_password(password)
        user = User(
            name=name,
            email=email,
            password_hash=creds["hash"],
            password_salt=creds["salt"],
            travel_style="comfort",
            preferred_transport=[]
        )
        self.db.add(user)
        await self.db.commit()
        logger.info("Registered user %s", user.id)
        return to_profile(user)

    async def login(self, email: str, password: str) -> UserProfile:
        return await guarded("login", self._login(email.strip().lower(), password))

    async def _login(self, email: str, password: str) -> UserProfile:
        user = await self.db.scalar(select(User).where(User.email == email))
        if not user or not verify_password(password, user.password_salt, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        return to_profile(user)

    async def get_profile(self, user_id: str) -> UserProfile:
        user = await guarded("get_profile", self._require_user(user_id))
        return to_profile(user)

    async def update_profile(self, user_id: str, changes: ProfileUpdate) -> UserProfile:
        return await guarded("update_profile", self._update(user_id, changes))

    async def update_preferences(self, user_id: str, changes: PreferencesUpdate) -> UserProfile:
        return await guarded("update_preferences", self._update(user_id, changes))

    async def _update(self, user_id: str, changes: PreferencesUpdate) -> UserProfile:
        user = await self._require_user(user_id)

        name = getattr(changes, "name", None)
        if name is not None:
            name = name.strip()
            if len(name) < 2:
                raise ValidationError("Name must be at least 2 characters long")
            user.name = name
        if changes.travel_style is not None:
            user.travel_style = changes.travel_style.value
        if changes.preferred_transport is not None:
            # de-duplicated, order kept
            user.preferred_transport = list(dict.fromkeys(t.value for t in changes.preferred_transport))

        await self.db.commit()
        return to_profile(user)

    async def delete_account(self, user_id: str, confirm: bool) -> None:
        if not confirm:
            raise ValidationError("Please confirm account deletion")
        await guarded("delete_account", self._delete_account(user_id))

    async def _delete_account(self, user_id: str) -> None:
        user = await self._require_user(user_id)
        await self.db.execute(
            delete(SearchHistoryEntry)
            .where(SearchHistoryEntry.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        await self.db.delete(user)
        await self.db.commit()
        logger.info("Deleted account %s", user_id)
