"""
Session extraction and authentication dependencies
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from postboard.core.config import get_settings
from postboard.core.exceptions import IdentityError, NoSessionError
from postboard.core.logging_config import LoggingConfig
from postboard.core.services import get_identity_provider
from postboard.models.user import SessionTokens, User
from postboard.services.identity_service import IdentityProvider

logger = LoggingConfig.get_logger(__name__)

SESSION_COOKIE = "session_token"
REFRESH_COOKIE = "refresh_token"
STATE_COOKIE = "auth_state"

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


def get_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[SessionTokens]:
    """
    Session tokens from the Authorization header or the session cookies

    Returns:
        SessionTokens if a token is present, None otherwise
    """
    if credentials:
        return SessionTokens(access_token=credentials.credentials)

    token = request.cookies.get(SESSION_COOKIE)
    if not token:
        return None
    return SessionTokens(access_token=token, refresh_token=request.cookies.get(REFRESH_COOKIE))


async def get_current_user_optional(
    session: Optional[SessionTokens] = Depends(get_session),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> Optional[User]:
    """Current user if the session is valid, otherwise None (no exception)"""
    if session is None:
        return None
    try:
        return await identity_provider.get_current_user(session)
    except NoSessionError:
        return None
    except IdentityError as e:
        logger.warning(f"Failed to validate session (non-critical): {e}")
        return None


async def get_current_user_required(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Require authentication: return User or raise 401"""
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def set_session_cookies(response: Response, session: SessionTokens):
    """Store session tokens in httponly cookies"""
    settings = get_settings()
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session.access_token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.session_max_age_seconds,
    )
    if session.refresh_token:
        response.set_cookie(
            key=REFRESH_COOKIE,
            value=session.refresh_token,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="lax",
            max_age=settings.session_max_age_seconds,
        )


def clear_session_cookies(response: Response):
    response.delete_cookie(key=SESSION_COOKIE)
    response.delete_cookie(key=REFRESH_COOKIE)
