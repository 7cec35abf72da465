"""
Integration test fixtures for the HTTP API.

Requests go straight to the ASGI app through httpx; the LLM provider is
replaced by a fake through dependency overrides.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from logaudit.api.router import get_summarizer
from logaudit.main import app
from logaudit.summarizer import LogSummarizerService


@pytest_asyncio.fixture
async def client(fake_provider):
    """
    AsyncClient bound to the app, with summaries served by fake_provider.

    IMPORTANT: Always use `await` with client methods:
        response = await client.post("/api/v1/compliance/evaluate", json={...})
    """

    def override_get_summarizer():
        return LogSummarizerService(provider=fake_provider)

    app.dependency_overrides[get_summarizer] = override_get_summarizer

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
