"""
Board controller: loads identity and posts, creates and edits posts, and exposes the
resulting state to the renderer.

All collaborators come in through BoardContext so tests can pass in-memory services.
"""
import asyncio
from dataclasses import dataclass
from typing import List, Optional

from postboard.components.board_renderer import (BoardView, Notification,
                                                 PendingEdit, render_board)
from postboard.core.exceptions import (IdentityError, NoSessionError,
                                       PostServiceError)
from postboard.core.logging_config import LoggingConfig
from postboard.models.post import Draft, Post, UpdatePostInput, order_newest_first
from postboard.models.user import SessionTokens, User
from postboard.services.identity_service import IdentityProvider
from postboard.services.post_service import PostService

logger = LoggingConfig.get_logger(__name__)

CREATE_FAILED_MESSAGE = "You must be signed in to create a post!"
EDIT_FAILED_MESSAGE = "You are not the owner of this post!"


@dataclass
class BoardContext:
    """Collaborators and caller session for one board"""
    post_service: PostService
    identity_provider: IdentityProvider
    session: Optional[SessionTokens] = None

    @property
    def access_token(self) -> Optional[str]:
        return self.session.access_token if self.session else None


class PostBoard:
    """State and actions of the single post board view"""

    def __init__(self, context: BoardContext, draft: Optional[Draft] = None):
        self.context = context
        self.posts: List[Post] = []
        self.draft = draft or Draft()
        self.current_user: Optional[User] = None
        self.notification: Optional[Notification] = None
        self.pending_edit: Optional[PendingEdit] = None

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    async def load(self):
        """Fetch posts and identity, independently of each other"""
        await asyncio.gather(self.refresh_posts(), self.load_identity())

    async def load_identity(self) -> Optional[User]:
        """Store the current user, or None when there is no usable session"""
        try:
            self.current_user = await self.context.identity_provider.get_current_user(self.context.session)
        except NoSessionError:
            self.current_user = None
        except IdentityError as e:
            logger.debug(f"Identity lookup failed, treating as signed out: {e}")
            self.current_user = None
        return self.current_user

    async def refresh_posts(self) -> bool:
        """Reload the whole list; on failure keep the list already shown"""
        try:
            posts = await self.context.post_service.list_posts()
        except PostServiceError as e:
            logger.error(f"Error fetching posts: {e}", extra={"error_type": e.error_type})
            return False
        self.posts = order_newest_first(posts)
        return True

    def find_post(self, post_id: str) -> Optional[Post]:
        for post in self.posts:
            if post.id == post_id:
                return post
        return None

    async def add_post(self) -> bool:
        """
        Create a post from the draft.

        An incomplete draft is ignored without contacting the service. Any service
        failure becomes the same notification and leaves the draft as typed.
        """
        self.dismiss_notification()
        if not self.draft.is_complete:
            return False

        try:
            await self.context.post_service.create_post(self.draft.to_input(), self.context.access_token)
        except PostServiceError as e:
            logger.warning(f"Create post failed: {e}", extra={"error_type": e.error_type})
            self.notification = Notification(message=CREATE_FAILED_MESSAGE)
            return False

        self.draft = Draft()
        await self.refresh_posts()
        return True

    def begin_edit(self, post_id: str) -> Optional[PendingEdit]:
        """Open an edit prefilled with the current title"""
        post = self.find_post(post_id)
        if post is None:
            return None
        self.pending_edit = PendingEdit(post_id=post.id, title=post.title)
        return self.pending_edit

    def cancel_edit(self):
        self.pending_edit = None

    async def submit_edit(self, post_id: str, new_title: Optional[str]) -> bool:
        """Send a new title for ``post_id``; an empty title cancels the edit"""
        self.dismiss_notification()
        self.cancel_edit()
        if not new_title:
            return False

        try:
            await self.context.post_service.update_post(
                UpdatePostInput(id=post_id, title=new_title),
                self.context.access_token,
            )
        except PostServiceError as e:
            logger.warning(f"Update post failed: {e}", extra={"post_id": post_id, "error_type": e.error_type})
            self.notification = Notification(message=EDIT_FAILED_MESSAGE)
            return False

        await self.refresh_posts()
        return True

    def dismiss_notification(self):
        self.notification = None

    async def sign_out(self):
        """End the session with the provider; the board is signed out even if that fails"""
        try:
            await self.context.identity_provider.sign_out(self.context.session)
        except IdentityError as e:
            logger.warning(f"Sign-out failed at the identity provider: {e}")
        self.context.session = None
        self.current_user = None
        self.cancel_edit()

    def render(self, now=None) -> BoardView:
        return render_board(
            self.posts,
            self.draft,
            self.current_user,
            notification=self.notification,
            pending_edit=self.pending_edit,
            now=now,
        )
