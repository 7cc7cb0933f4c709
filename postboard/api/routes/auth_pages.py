"""
Sign-in, callback and sign-out pages
"""
import uuid
from typing import Optional

from fastapi import (APIRouter, Depends, Form, HTTPException, Request,
                     status)
from fastapi.responses import RedirectResponse

from postboard.api.routes.pages import get_board
from postboard.components.post_board import PostBoard
from postboard.core.auth import (STATE_COOKIE, clear_session_cookies,
                                 set_session_cookies)
from postboard.core.exceptions import IdentityError
from postboard.core.logging_config import LoggingConfig
from postboard.core.services import get_identity_provider
from postboard.core.templates import render_template
from postboard.services.identity_service import IdentityProvider

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/login")
async def login_page(request: Request, identity_provider: IdentityProvider = Depends(get_identity_provider)):
    """Hosted UI redirect, or the local sign-in form"""
    if identity_provider.uses_hosted_ui:
        state = uuid.uuid4().hex
        response = RedirectResponse(identity_provider.authorize_url(state), status_code=status.HTTP_302_FOUND)
        response.set_cookie(key=STATE_COOKIE, value=state, httponly=True, samesite="lax", max_age=600)
        return response
    return render_template("auth/login.html", {"error": None, "username": ""}, request)


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
):
    """Local sign-in form submission"""
    if identity_provider.uses_hosted_ui:
        return RedirectResponse("/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    try:
        session = identity_provider.sign_in(username)
    except ValueError as e:
        return render_template(
            "auth/login.html",
            {"error": str(e), "username": username},
            request,
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookies(response, session)
    return response


@router.get("/callback")
async def callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    identity_provider: IdentityProvider = Depends(get_identity_provider),
):
    """Hosted UI redirect target: exchange the code and start the session"""
    if not identity_provider.uses_hosted_ui:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    expected_state = request.cookies.get(STATE_COOKIE)
    if not code or not state or state != expected_state:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid sign-in callback")

    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(key=STATE_COOKIE)
    try:
        session = await identity_provider.exchange_code(code)
    except IdentityError as e:
        logger.warning(f"Sign-in failed: {e}")
        return response

    set_session_cookies(response, session)
    return response


@router.post("/logout")
async def logout(board: PostBoard = Depends(get_board)):
    """End the session and return to the board"""
    await board.sign_out()
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookies(response)
    return response
