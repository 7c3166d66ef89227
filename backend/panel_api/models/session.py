"""
Session model decoded from the panel JWT.
"""
from typing import Optional

from pydantic import BaseModel, Field


class SessionUser(BaseModel):
    """
    Discord identity carried by the session token.
    """
    id: str = Field(..., alias="sub", description="Discord user id")
    username: Optional[str] = Field(None, description="Discord username")
    avatar: Optional[str] = Field(None, description="Discord avatar hash")
    access_token: Optional[str] = Field(
        None,
        description="Discord OAuth access token used for /users/@me calls",
    )

    class Config:
        populate_by_name = True
