"""
Pytest configuration and fixtures.

Climatiq is never contacted: every estimator is built on an httpx.MockTransport
whose handler the test controls through ``climatiq``.
"""
import json
import logging

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.main import create_app
from app.services.emissions import EmissionsService
from app.services.entry_store import EntryStore
from app.settings import Settings

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


class FakeClimatiq:
    """Records requests and answers with a configurable status and body."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: object = {"co2e": 12.34, "co2e_unit": "kg"}

    def respond(self, status_code: int, body: object) -> None:
        self.status_code = status_code
        self.body = body

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def test_settings():
    return Settings(
        CLIMATIQ_API_KEY="test-key",
        CLIMATIQ_ESTIMATE_URL="https://api.climatiq.io/data/v1/estimate",
        CLIMATIQ_DATA_VERSION="28.28",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def climatiq():
    return FakeClimatiq()


@pytest.fixture
def emissions_service(test_settings, climatiq):
    return EmissionsService(test_settings, transport=httpx.MockTransport(climatiq.handler))


@pytest.fixture
def store():
    return EntryStore()


@pytest.fixture
def test_app(test_settings, climatiq):
    return create_app(test_settings, transport=httpx.MockTransport(climatiq.handler))


@pytest_asyncio.fixture
async def test_async_client(test_app):
    """
    Async HTTP client bound to the app through ASGITransport.
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://localhost:8000") as ac:
        yield ac
