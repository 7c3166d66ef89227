"""
Session token management.

After the Discord OAuth exchange the panel issues its own signed JWT that
carries the Discord identity and the user's Discord access token.
"""
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt

from panel_api.config import get_settings


def create_session_token(
    user: dict[str, Any],
    access_token: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a session JWT for a Discord user.

    Args:
        user: Discord user object (`id`, `username`, `avatar`)
        access_token: Discord OAuth access token, used later for /users/@me calls
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()

    if expires_delta is None:
        expires_delta = timedelta(days=settings.jwt_expire_days)

    now = datetime.now(timezone.utc)

    payload = {
        "sub": str(user["id"]),
        "username": user.get("username"),
        "avatar": user.get("avatar"),
        "access_token": access_token,
        "exp": now + expires_delta,
        "iat": now,
    }

    return jwt.encode(
        payload,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a session JWT.

    Raises:
        ExpiredSignatureError: If the token is expired
        JWTError: If the token is otherwise invalid
    """
    settings = get_settings()

    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
    )
