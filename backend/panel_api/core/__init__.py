"""
Core module - errors and session security.
"""
from panel_api.core.exceptions import (
    PanelError,
    BadRequest,
    Forbidden,
    NotFound,
    UpstreamFailure,
    register_exception_handlers,
)
from panel_api.core.security import create_session_token, decode_session_token

__all__ = [
    "PanelError",
    "BadRequest",
    "Forbidden",
    "NotFound",
    "UpstreamFailure",
    "register_exception_handlers",
    "create_session_token",
    "decode_session_token",
]
