"""
Pytest configuration and fixtures
"""
import os

import pytest

# Tests always run against the in-memory backend, with logs on stdout only
os.environ["POST_SERVICE_BACKEND"] = "memory"
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")

from fastapi.testclient import TestClient  # noqa: E402

from postboard.components.post_board import BoardContext, PostBoard  # noqa: E402
from postboard.core.config import Settings  # noqa: E402
from postboard.core.services import Services  # noqa: E402
from postboard.main import create_app  # noqa: E402
from postboard.models.user import SessionTokens  # noqa: E402
from postboard.services.memory_backend import (InMemoryPostService,  # noqa: E402
                                               LocalIdentityProvider)


@pytest.fixture
def identity() -> LocalIdentityProvider:
    return LocalIdentityProvider()


@pytest.fixture
def post_service(identity) -> InMemoryPostService:
    return InMemoryPostService(identity)


@pytest.fixture
def alice(identity) -> SessionTokens:
    """Session for user 'alice'"""
    return identity.sign_in("alice")


@pytest.fixture
def bob(identity) -> SessionTokens:
    """Session for user 'bob'"""
    return identity.sign_in("bob")


@pytest.fixture
def make_board(post_service, identity):
    """Factory for boards bound to a session (None for anonymous)"""
    def _make(session=None) -> PostBoard:
        return PostBoard(BoardContext(post_service, identity, session))
    return _make


@pytest.fixture
def settings() -> Settings:
    return Settings(post_service_backend="memory", log_file_enabled=False)


@pytest.fixture
def app(settings, post_service, identity):
    """Application wired to the in-memory services of this test"""
    return create_app(settings=settings, services=Services(post_service, identity))


@pytest.fixture
def client(app) -> TestClient:
    """Anonymous test client"""
    return TestClient(app)


@pytest.fixture
def client_for(app):
    """Factory for a test client carrying a session cookie"""
    def _client(session: SessionTokens) -> TestClient:
        return TestClient(app, cookies={"session_token": session.access_token})
    return _client
