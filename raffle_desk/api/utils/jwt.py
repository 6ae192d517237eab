import secrets
from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(email: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Generate a session token for a staff account

    Args:
        email: Normalized account email (becomes the subject)
        role: Account role at login time (informational)
        expires_delta: Token lifetime, SESSION_TTL_HOURS by default

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(hours=ApplicationConfig.SESSION_TTL_HOURS)
    payload = {
        "sub": email,
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
        "jti": secrets.token_hex(8),
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
        return payload
    except JWTError:
        return None


def identity_from_token(token: Optional[str]) -> Optional[str]:
    """Email carried by a valid session token, or None"""
    if not token:
        return None
    payload = verify_jwt(token)
    if payload is None:
        return None
    return payload.get("sub") or None
