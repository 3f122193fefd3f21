"""
ProdTrack Security Utilities

bcrypt password hashing and HS256 session tokens. A session token carries
the user's id as ``sub`` plus their username and role.
"""

from datetime import datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign ``data`` with an ``exp`` claim; defaults to JWT_EXPIRE_HOURS from now."""
    settings = get_settings()
    lifetime = expires_delta if expires_delta is not None else timedelta(hours=settings.jwt_expire_hours)
    claims = {**data, "exp": datetime.utcnow() + lifetime}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def issue_session_token(user_id: str, username: str, role: str) -> str:
    """Sign the session claims handed back on login."""
    return create_access_token({"sub": str(user_id), "username": username, "role": role})


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a session token. Returns None when invalid or expired."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload
