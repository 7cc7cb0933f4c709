"""
Client for the hosted GraphQL API (AppSync-style auth modes)
"""
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from postboard.core.exceptions import (PostNotFound, PostServiceError,
                                       PostServiceForbidden,
                                       PostServiceUnauthorized)
from postboard.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)


class AuthMode(str, Enum):
    """How a request is authorized"""
    API_KEY = "apiKey"  # public read
    USER_POOL = "userPool"  # signed-in user's access token


# errorType values the service reports for authorization and condition failures
_UNAUTHORIZED_ERROR_TYPES = {"Unauthorized", "UnauthorizedException"}
_FORBIDDEN_ERROR_TYPES = {"DynamoDB:ConditionalCheckFailedException"}


class GraphQLClient:
    """
    Thin async GraphQL client over httpx.

    Every failure is raised as a PostServiceError subclass; callers never see httpx exceptions.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                limits=httpx.Limits(
                    max_keepalive_connections=5,
                    max_connections=10,
                ),
            )
        return self._client

    async def close(self):
        """Close the underlying HTTP client"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def _headers(self, auth_mode: AuthMode, access_token: Optional[str]) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if auth_mode == AuthMode.API_KEY:
            if not self.api_key:
                raise PostServiceError("API key auth requested but no API key is configured")
            headers["x-api-key"] = self.api_key
        else:
            if not access_token:
                raise PostServiceUnauthorized("No session for a user-pool request", "NoSession")
            headers["Authorization"] = access_token
        return headers

    @staticmethod
    def _raise_for_errors(errors: List[Dict[str, Any]], auth_mode: AuthMode):
        first = errors[0] if errors else {}
        error_type = first.get("errorType")
        message = "; ".join(e.get("message", "unknown error") for e in errors)

        if error_type in _UNAUTHORIZED_ERROR_TYPES:
            if auth_mode == AuthMode.USER_POOL:
                raise PostServiceForbidden(message, error_type)
            raise PostServiceUnauthorized(message, error_type)
        if error_type in _FORBIDDEN_ERROR_TYPES:
            raise PostServiceForbidden(message, error_type)
        raise PostServiceError(message, error_type)

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        auth_mode: AuthMode = AuthMode.API_KEY,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Execute a GraphQL document and return its ``data`` object

        Args:
            query: GraphQL document
            variables: Operation variables
            auth_mode: API key (public) or user pool (access token)
            access_token: Session access token, required for USER_POOL

        Raises:
            PostServiceUnauthorized: No session, or the service rejected the credentials
            PostServiceForbidden: Authenticated caller not allowed (e.g. not the owner)
            PostServiceError: Transport, HTTP or other GraphQL errors
        """
        headers = self._headers(auth_mode, access_token)
        payload = {"query": query, "variables": variables or {}}
        client = await self._get_client()

        try:
            response = await client.post(self.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise PostServiceError(f"GraphQL transport error: {e}", type(e).__name__) from e

        if response.status_code == 401:
            raise PostServiceUnauthorized("GraphQL API rejected the credentials", "HTTP401")
        if response.status_code == 403:
            raise PostServiceForbidden("GraphQL API denied the request", "HTTP403")

        try:
            body = response.json()
        except ValueError as e:
            raise PostServiceError(
                f"GraphQL API returned non-JSON response (HTTP {response.status_code})",
                "InvalidResponse",
            ) from e

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            logger.debug("GraphQL errors", extra={"errors": errors, "auth_mode": auth_mode.value})
            self._raise_for_errors(errors, auth_mode)

        if response.status_code >= 400:
            raise PostServiceError(f"GraphQL API returned HTTP {response.status_code}", f"HTTP{response.status_code}")

        data = body.get("data") if isinstance(body, dict) else None
        if data is None:
            raise PostServiceError("GraphQL response has no data", "EmptyResponse")
        return data

    async def health_check(self) -> bool:
        """Check that the endpoint answers a trivial public query"""
        try:
            await self.execute("query Health { __typename }")
            return True
        except PostServiceError:
            return False


def require_field(data: Dict[str, Any], field: str, what: str) -> Dict[str, Any]:
    """Return ``data[field]`` or raise PostNotFound when the service returned null"""
    value = data.get(field)
    if value is None:
        raise PostNotFound(f"{what} returned no result", "NullResult")
    return value
