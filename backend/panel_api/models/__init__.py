"""
Pydantic models for session data.
"""
from panel_api.models.session import SessionUser

__all__ = ["SessionUser"]
