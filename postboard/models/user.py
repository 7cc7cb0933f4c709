"""
Identity and session models
"""
from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """Minimal identity projection used for ownership checks and display"""
    username: str = Field(..., min_length=1)


class SessionTokens(BaseModel):
    """Tokens held by the browser for the current session"""
    access_token: str
    refresh_token: Optional[str] = None
