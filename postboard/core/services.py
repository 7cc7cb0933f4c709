"""
Construction of the post service and identity provider, and FastAPI dependencies
that hand them to routes.

Instances live on ``app.state`` rather than in module globals, so each app (and each
test) carries its own.
"""
from dataclasses import dataclass

from fastapi import Request

from postboard.core.config import Settings
from postboard.core.graphql_client import GraphQLClient
from postboard.core.logging_config import LoggingConfig
from postboard.services.identity_service import (HostedIdentityProvider,
                                                 IdentityProvider)
from postboard.services.memory_backend import (InMemoryPostService,
                                               LocalIdentityProvider)
from postboard.services.post_service import GraphQLPostService, PostService

logger = LoggingConfig.get_logger(__name__)


@dataclass
class Services:
    post_service: PostService
    identity_provider: IdentityProvider

    async def close(self):
        await self.post_service.close()
        await self.identity_provider.close()


def build_services(settings: Settings) -> Services:
    """
    Create the collaborators selected by ``post_service_backend``

    Raises:
        ConfigurationError: hosted backend selected without endpoint/credentials
    """
    if settings.uses_hosted_backend:
        settings.require_hosted_settings()
        client = GraphQLClient(
            endpoint=settings.graphql_endpoint,
            api_key=settings.graphql_api_key,
            timeout=settings.graphql_timeout_seconds,
        )
        identity = HostedIdentityProvider(
            domain=settings.auth_domain,
            client_id=settings.auth_client_id,
            client_secret=settings.auth_client_secret,
            redirect_uri=settings.auth_redirect_uri,
            scopes=settings.auth_scopes,
            timeout=settings.auth_timeout_seconds,
        )
        logger.info("Using hosted GraphQL post service", extra={"endpoint": settings.graphql_endpoint})
        return Services(
            post_service=GraphQLPostService(client, page_size=settings.graphql_page_size),
            identity_provider=identity,
        )

    local_identity = LocalIdentityProvider()
    logger.info("Using in-memory post service")
    return Services(
        post_service=InMemoryPostService(local_identity),
        identity_provider=local_identity,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_post_service(request: Request) -> PostService:
    return get_services(request).post_service


def get_identity_provider(request: Request) -> IdentityProvider:
    return get_services(request).identity_provider
