"""
Post models shared by the post services, the board and the JSON API
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from postboard.utils.datetime_utils import ensure_utc


class Post(BaseModel):
    """A post as returned by the post service. ``id`` and ``owner`` are server assigned."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    content: str = ""
    owner: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def is_owned_by(self, username: Optional[str]) -> bool:
        """True when ``username`` is the recorded owner"""
        return username is not None and self.owner == username


class CreatePostInput(BaseModel):
    """createPost input. Owner is never sent; the service derives it from the session."""
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)

    def to_variables(self) -> Dict[str, Any]:
        return {"input": self.model_dump()}


class UpdatePostInput(BaseModel):
    """updatePost input. Only the title is mutable."""
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)

    def to_variables(self) -> Dict[str, Any]:
        return {"input": self.model_dump()}


class UpdatePostRequest(BaseModel):
    """Body of PATCH /api/posts/{id}"""
    title: str = Field(..., min_length=1)


class Draft(BaseModel):
    """Transient, client-held input for a post that has not been created yet"""
    title: str = ""
    content: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.title) and bool(self.content)

    def to_input(self) -> CreatePostInput:
        return CreatePostInput(title=self.title, content=self.content)


def order_newest_first(posts: List[Post]) -> List[Post]:
    """
    Order posts by creation time, newest first.

    Posts without ``created_at`` follow the dated ones in the order the service returned them.
    """
    dated = [p for p in posts if p.created_at is not None]
    undated = [p for p in posts if p.created_at is None]
    dated.sort(key=lambda p: ensure_utc(p.created_at), reverse=True)
    return dated + undated
