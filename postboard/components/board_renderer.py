"""
Pure rendering of board state into a view model for the templates
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from postboard.models.post import Draft, Post
from postboard.models.user import User
from postboard.utils.datetime_utils import humanize_since


class Notification(BaseModel):
    """Dismissible message shown above the board"""
    message: str
    level: str = "error"


class PendingEdit(BaseModel):
    """Edit in progress; the title starts as the post's current title"""
    post_id: str
    title: str


class PostCard(BaseModel):
    id: str
    title: str
    content: str
    owner_name: str
    avatar_initial: str
    timestamp_label: str
    can_edit: bool
    is_editing: bool = False
    edit_title: Optional[str] = None


class BoardView(BaseModel):
    username: Optional[str] = None
    show_sign_out: bool
    show_create_form: bool
    draft: Draft
    cards: List[PostCard]
    show_empty_state: bool
    notification: Optional[Notification] = None


def render_post_card(
    post: Post,
    current_user: Optional[User],
    pending_edit: Optional[PendingEdit],
    now: Optional[datetime] = None,
) -> PostCard:
    can_edit = current_user is not None and post.is_owned_by(current_user.username)
    is_editing = can_edit and pending_edit is not None and pending_edit.post_id == post.id
    return PostCard(
        id=post.id,
        title=post.title,
        content=post.content,
        owner_name=post.owner or "Anonymous",
        avatar_initial=(post.owner or "A")[0].upper(),
        timestamp_label=humanize_since(post.created_at, now),
        can_edit=can_edit,
        is_editing=is_editing,
        edit_title=pending_edit.title if is_editing else None,
    )


def render_board(
    posts: List[Post],
    draft: Draft,
    current_user: Optional[User],
    notification: Optional[Notification] = None,
    pending_edit: Optional[PendingEdit] = None,
    now: Optional[datetime] = None,
) -> BoardView:
    """
    Build the board view model.

    The create form and sign-out control appear only for a signed-in user; edit
    controls only on that user's own posts; the placeholder only for an empty list.
    """
    signed_in = current_user is not None
    return BoardView(
        username=current_user.username if signed_in else None,
        show_sign_out=signed_in,
        show_create_form=signed_in,
        draft=draft,
        cards=[render_post_card(post, current_user, pending_edit, now) for post in posts],
        show_empty_state=len(posts) == 0,
        notification=notification,
    )
