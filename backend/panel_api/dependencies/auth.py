"""
Authentication dependencies for route protection.
"""
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from jose import JWTError
from jose.exceptions import ExpiredSignatureError
from pydantic import ValidationError

from panel_api.core.security import decode_session_token
from panel_api.models.session import SessionUser


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_session(
    authorization: Annotated[Optional[str], Header(description="Bearer session token")] = None,
) -> SessionUser:
    """
    Dependency to get the current session from the Authorization header.

    Header format: `Authorization: Bearer <token>`

    Raises:
        HTTPException 401: If the header or token is missing, expired or invalid
    """
    if not authorization:
        raise _unauthorized("Missing Authorization header")

    parts = authorization.split()
    token = parts[1] if len(parts) >= 2 else None
    if not token:
        raise _unauthorized("Missing token")

    try:
        payload = decode_session_token(token)
    except ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except JWTError:
        raise _unauthorized("Invalid token")

    try:
        return SessionUser(**payload)
    except ValidationError:
        raise _unauthorized("Invalid token")


# Type alias for cleaner route signatures
CurrentSession = Annotated[SessionUser, Depends(get_current_session)]
