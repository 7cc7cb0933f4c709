"""
Pydantic models
"""
from postboard.models.post import (CreatePostInput, Draft, Post,  # noqa: F401
                                   UpdatePostInput, UpdatePostRequest,
                                   order_newest_first)
from postboard.models.user import SessionTokens, User  # noqa: F401
