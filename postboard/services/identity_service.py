"""
Identity provider contract and the hosted OAuth2 / OIDC implementation
"""
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from postboard.core.exceptions import IdentityError, NoSessionError
from postboard.core.logging_config import LoggingConfig
from postboard.models.user import SessionTokens, User

logger = LoggingConfig.get_logger(__name__)


class IdentityProvider(ABC):
    """Source of the current-user identity and the sign-out action"""

    # True when sign-in happens on the provider's hosted UI (redirect flow)
    uses_hosted_ui: bool = False

    @abstractmethod
    async def get_current_user(self, session: Optional[SessionTokens]) -> User:
        """
        Return the signed-in user

        Raises:
            NoSessionError: No session, or the session is no longer valid
            IdentityError: Provider could not be queried
        """

    @abstractmethod
    async def sign_out(self, session: Optional[SessionTokens]) -> None:
        """End the session"""

    async def close(self):
        pass


class HostedIdentityProvider(IdentityProvider):
    """
    Identity from a hosted OAuth2 authorization server (Cognito hosted UI or any OIDC
    provider with the same endpoints): /oauth2/authorize, /oauth2/token,
    /oauth2/userInfo and /oauth2/revoke.
    """

    uses_hosted_ui = True

    def __init__(
        self,
        domain: str,
        client_id: str,
        redirect_uri: str,
        client_secret: Optional[str] = None,
        scopes: str = "openid profile",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.domain = domain.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scopes = scopes
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.domain,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def _client_auth(self) -> Optional[httpx.BasicAuth]:
        if self.client_secret:
            return httpx.BasicAuth(self.client_id, self.client_secret)
        return None

    def authorize_url(self, state: str) -> str:
        """URL of the hosted sign-in page"""
        url = httpx.URL(
            f"{self.domain}/oauth2/authorize",
            params={
                "response_type": "code",
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "scope": self.scopes,
                "state": state,
            },
        )
        return str(url)

    async def exchange_code(self, code: str) -> SessionTokens:
        """Trade an authorization code for session tokens"""
        client = await self._get_client()
        form = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "code": code,
            "redirect_uri": self.redirect_uri,
        }
        try:
            response = await client.post("/oauth2/token", data=form, auth=self._client_auth())
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise IdentityError(f"Token exchange failed: {e}") from e

        access_token = body.get("access_token")
        if not access_token:
            raise IdentityError("Token response has no access_token")
        return SessionTokens(access_token=access_token, refresh_token=body.get("refresh_token"))

    async def get_current_user(self, session: Optional[SessionTokens]) -> User:
        if session is None or not session.access_token:
            raise NoSessionError("No session")

        client = await self._get_client()
        try:
            response = await client.get(
                "/oauth2/userInfo",
                headers={"Authorization": f"Bearer {session.access_token}"},
            )
        except httpx.HTTPError as e:
            raise IdentityError(f"userInfo request failed: {e}") from e

        if response.status_code in (400, 401, 403):
            raise NoSessionError(f"Session rejected (HTTP {response.status_code})")
        if response.status_code >= 400:
            raise IdentityError(f"userInfo returned HTTP {response.status_code}")

        try:
            claims = response.json()
        except ValueError as e:
            raise IdentityError("userInfo returned non-JSON response") from e

        username = claims.get("username") or claims.get("cognito:username")
        if not username:
            raise IdentityError("userInfo response has no username")
        return User(username=username)

    async def sign_out(self, session: Optional[SessionTokens]) -> None:
        """Revoke the refresh token; the access token simply expires"""
        if session is None or not session.refresh_token:
            return

        client = await self._get_client()
        form = {"token": session.refresh_token, "client_id": self.client_id}
        try:
            response = await client.post("/oauth2/revoke", data=form, auth=self._client_auth())
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise IdentityError(f"Token revocation failed: {e}") from e
        logger.info("Session revoked")
