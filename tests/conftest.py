"""Pytest configuration and fixtures."""

from typing import List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from linkdash.common.logging_config import setup_logging
from linkdash.database import InMemoryLinkStore
from linkdash.identity import issue_token
from linkdash.service import LinkService
from linkdash.shortcode import ShortCodeGenerator
from web_app import create_app

TEST_SECRET = "test-secret"


class RecordingStore(InMemoryLinkStore):
    """In-memory store that records the name of every store call."""
    
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls: List[str] = []
    
    def calls_to(self, name: str) -> int:
        return self.calls.count(name)
    
    async def insert_link(self, owner_id, target_url, code):
        self.calls.append("insert_link")
        return await super().insert_link(owner_id, target_url, code)
    
    async def find_by_code(self, code):
        self.calls.append("find_by_code")
        return await super().find_by_code(code)
    
    async def find_by_id(self, link_id):
        self.calls.append("find_by_id")
        return await super().find_by_id(link_id)
    
    async def find_by_owner(self, owner_id):
        self.calls.append("find_by_owner")
        return await super().find_by_owner(owner_id)
    
    async def update_link(self, link_id, target_url=None, code=None):
        self.calls.append("update_link")
        return await super().update_link(link_id, target_url=target_url, code=code)
    
    async def delete_link(self, link_id):
        self.calls.append("delete_link")
        return await super().delete_link(link_id)


class ScriptedGenerator(ShortCodeGenerator):
    """Generator that hands out a fixed sequence of codes, repeating the last."""
    
    def __init__(self, codes: List[str]):
        super().__init__(default_length=len(codes[0]))
        self.codes = list(codes)
        self.generated = 0
    
    def generate_random(self, length: Optional[int] = None) -> str:
        code = self.codes[min(self.generated, len(self.codes) - 1)]
        self.generated += 1
        return code


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def store(logger) -> RecordingStore:
    """Create an empty in-memory store."""
    return RecordingStore(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=7)


@pytest.fixture
def service(store, short_code_generator, logger) -> LinkService:
    """Create service instance."""
    return LinkService(
        store=store,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def config():
    """Application config pointing at the in-memory store."""
    return Config(
        database_url="memory://",
        base_url="http://testserver",
        auth_secret=TEST_SECRET,
    )


@pytest.fixture
def app(store, short_code_generator, logger, config):
    """Create test FastAPI app."""
    service = LinkService(
        store=store,
        short_code_generator=short_code_generator,
        logger=logger,
        reserved_codes=config.reserved_codes,
    )
    return create_app(
        store_instance=store,
        service_instance=service,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    """Build bearer headers for a given owner id."""
    def _headers(owner_id: str) -> dict:
        return {"Authorization": f"Bearer {issue_token(owner_id, TEST_SECRET)}"}
    return _headers
