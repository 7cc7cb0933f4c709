"""
In-process backend: a post store and a local identity provider that honour the same
contracts as the hosted services. Used for local runs and tests.
"""
import asyncio
import uuid
from typing import Dict, List, Optional

from postboard.core.exceptions import (NoSessionError, PostNotFound,
                                       PostServiceForbidden,
                                       PostServiceUnauthorized)
from postboard.core.logging_config import LoggingConfig
from postboard.models.post import CreatePostInput, Post, UpdatePostInput
from postboard.models.user import SessionTokens, User
from postboard.services.identity_service import IdentityProvider
from postboard.services.post_service import PostService
from postboard.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)


class LocalIdentityProvider(IdentityProvider):
    """Issues opaque session tokens for a username typed into the local sign-in form"""

    uses_hosted_ui = False

    def __init__(self):
        self._sessions: Dict[str, str] = {}

    def sign_in(self, username: str) -> SessionTokens:
        username = (username or "").strip()
        if not username:
            raise ValueError("Username is required")
        token = uuid.uuid4().hex
        self._sessions[token] = username
        logger.info("Local session issued", extra={"username": username})
        return SessionTokens(access_token=token)

    def resolve(self, access_token: Optional[str]) -> Optional[str]:
        """Username behind a token, or None"""
        if not access_token:
            return None
        return self._sessions.get(access_token)

    async def get_current_user(self, session: Optional[SessionTokens]) -> User:
        username = self.resolve(session.access_token if session else None)
        if username is None:
            raise NoSessionError("No session")
        return User(username=username)

    async def sign_out(self, session: Optional[SessionTokens]) -> None:
        if session is not None:
            self._sessions.pop(session.access_token, None)


class InMemoryPostService(PostService):
    """
    Post store kept in a list, in creation order.

    Authorization mirrors the hosted API: anyone may list, writes need a session known
    to ``identity``, updates need the caller to be the owner.
    """

    def __init__(self, identity: LocalIdentityProvider):
        self.identity = identity
        self._posts: List[Post] = []
        self._lock = asyncio.Lock()

    def _caller(self, access_token: Optional[str]) -> str:
        username = self.identity.resolve(access_token)
        if username is None:
            raise PostServiceUnauthorized("Not authorized to access posts", "Unauthorized")
        return username

    async def list_posts(self) -> List[Post]:
        async with self._lock:
            return [post.model_copy() for post in self._posts]

    async def create_post(self, data: CreatePostInput, access_token: Optional[str]) -> Post:
        owner = self._caller(access_token)
        now = utc_now()
        post = Post(
            id=str(uuid.uuid4()),
            title=data.title,
            content=data.content,
            owner=owner,
            created_at=now,
            updated_at=now,
        )
        async with self._lock:
            self._posts.append(post)
        return post.model_copy()

    async def update_post(self, data: UpdatePostInput, access_token: Optional[str]) -> Post:
        caller = self._caller(access_token)
        async with self._lock:
            for index, post in enumerate(self._posts):
                if post.id != data.id:
                    continue
                if not post.is_owned_by(caller):
                    raise PostServiceForbidden(
                        f"{caller} is not the owner of post {data.id}",
                        "DynamoDB:ConditionalCheckFailedException",
                    )
                updated = post.model_copy(update={"title": data.title, "updated_at": utc_now()})
                self._posts[index] = updated
                return updated.model_copy()
        raise PostNotFound(f"Post {data.id} not found", "NotFound")
