"""Security utilities: password hashing and opaque bearer tokens."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext

from litework.core.config import get_settings

password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return password_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return password_context.verify(plain, hashed)


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """Tokens are stored and looked up by their SHA-256 digest only."""
    return hashlib.sha256(token.encode()).hexdigest()


def token_expiry(now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(hours=get_settings().auth_token_ttl_hours)
