"""Pytest configuration and fixtures."""

import pytest
from httpx import AsyncClient, ASGITransport

from config import Config
from shortener.database.memory import InMemoryShortenerDB
from shortener.handlers import LinkHandlers
from shortener.identity import IdentityService
from shortener.security import TokenService
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging
from web_app import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def test_db(logger) -> InMemoryShortenerDB:
    """Fresh in-memory storage per test."""
    return InMemoryShortenerDB(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(test_db, short_code_generator, logger) -> URLShortenerService:
    """Create service instance."""
    return URLShortenerService(
        db=test_db,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def tokens(logger) -> TokenService:
    return TokenService(secret=TEST_SECRET, logger=logger)


@pytest.fixture
def identity(test_db, tokens, logger) -> IdentityService:
    return IdentityService(db=test_db, tokens=tokens, logger=logger)


@pytest.fixture
def handlers(service, identity, logger) -> LinkHandlers:
    return LinkHandlers(service=service, identity=identity, logger=logger)


@pytest.fixture
async def owner(identity):
    """A registered user with a valid token."""
    user = await identity.signup("Owner", "owner@example.com", "owner-pass")
    token = await identity.authenticate("owner@example.com", "owner-pass")
    return {"id": user.id, "token": token}


@pytest.fixture
async def other_user(identity):
    """A second registered user, used for ownership checks."""
    user = await identity.signup("Other", "other@example.com", "other-pass")
    token = await identity.authenticate("other@example.com", "other-pass")
    return {"id": user.id, "token": token}


@pytest.fixture
def config():
    return Config(
        storage_backend="memory",
        base_url="http://testserver",
        jwt_secret=TEST_SECRET,
    )


@pytest.fixture
def app(service, identity, config):
    """Create test FastAPI app."""
    return create_app(
        service_instance=service,
        identity_instance=identity,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
