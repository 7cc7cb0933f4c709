"""
Posts JSON API
"""
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from postboard.core.auth import get_session
from postboard.core.exceptions import (PostNotFound, PostServiceError,
                                       PostServiceForbidden,
                                       PostServiceUnauthorized)
from postboard.core.logging_config import LoggingConfig
from postboard.core.services import get_post_service
from postboard.models.post import (CreatePostInput, Post, UpdatePostInput,
                                   UpdatePostRequest, order_newest_first)
from postboard.models.user import SessionTokens
from postboard.services.post_service import PostService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/posts", tags=["posts"])


def _raise_http(e: PostServiceError) -> NoReturn:
    if isinstance(e, PostServiceUnauthorized):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(e, PostServiceForbidden):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not the owner of this post")
    if isinstance(e, PostNotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    logger.error(f"Post service error: {e}", extra={"error_type": e.error_type})
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Post service unavailable")


@router.get("/", response_model=List[Post])
async def list_posts(post_service: PostService = Depends(get_post_service)):
    """All posts, newest first. No session needed."""
    try:
        posts = await post_service.list_posts()
    except PostServiceError as e:
        _raise_http(e)
    return order_newest_first(posts)


@router.post("/", response_model=Post, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: CreatePostInput,
    session: Optional[SessionTokens] = Depends(get_session),
    post_service: PostService = Depends(get_post_service),
):
    """Create a post owned by the caller"""
    try:
        return await post_service.create_post(data, session.access_token if session else None)
    except PostServiceError as e:
        _raise_http(e)


@router.patch("/{post_id}", response_model=Post)
async def update_post(
    post_id: str,
    data: UpdatePostRequest,
    session: Optional[SessionTokens] = Depends(get_session),
    post_service: PostService = Depends(get_post_service),
):
    """Change the title of one of the caller's posts"""
    try:
        return await post_service.update_post(
            UpdatePostInput(id=post_id, title=data.title),
            session.access_token if session else None,
        )
    except PostServiceError as e:
        _raise_http(e)
