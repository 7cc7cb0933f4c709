"""
Board page routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from postboard.components.post_board import BoardContext, PostBoard
from postboard.core.auth import get_session
from postboard.core.services import get_identity_provider, get_post_service
from postboard.core.templates import render_template
from postboard.models.post import Draft
from postboard.models.user import SessionTokens
from postboard.services.identity_service import IdentityProvider
from postboard.services.post_service import PostService

router = APIRouter(tags=["pages"])


def get_board(
    session: Optional[SessionTokens] = Depends(get_session),
    post_service: PostService = Depends(get_post_service),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> PostBoard:
    """Fresh board for this request, bound to the caller's session"""
    return PostBoard(BoardContext(post_service, identity_provider, session))


def _render_board(request: Request, board: PostBoard):
    return render_template("board.html", {"board": board.render()}, request)


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, board: PostBoard = Depends(get_board)):
    """Post board"""
    await board.load()
    return _render_board(request, board)


@router.post("/posts", response_class=HTMLResponse)
async def create_post(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    board: PostBoard = Depends(get_board),
):
    """Publish the submitted draft"""
    await board.load()
    board.draft = Draft(title=title, content=content)
    if await board.add_post():
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    return _render_board(request, board)


@router.get("/posts/{post_id}/edit", response_class=HTMLResponse)
async def edit_post_form(request: Request, post_id: str, board: PostBoard = Depends(get_board)):
    """Board with the title editor open for one post"""
    await board.load()
    if board.begin_edit(post_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return _render_board(request, board)


@router.post("/posts/{post_id}/edit", response_class=HTMLResponse)
async def edit_post(
    request: Request,
    post_id: str,
    title: str = Form(""),
    board: PostBoard = Depends(get_board),
):
    """Submit a new title"""
    await board.load()
    if await board.submit_edit(post_id, title):
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    return _render_board(request, board)
