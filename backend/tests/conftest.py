"""Shared test fixtures."""

from collections.abc import AsyncGenerator, Iterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from resume_builder.core.config import Settings
from resume_builder.main import create_app
from resume_builder.providers.llm.mock_adapter import MockLLMProvider


@pytest.fixture
def mock_llm() -> Iterator[MockLLMProvider]:
    """Fixture that provides a fresh mock LLM provider.

    Replies are scripted per test with ``queue_response``; without one the
    provider answers with a default string that carries no data block.

    Yields:
        MockLLMProvider instance.
    """
    mock = MockLLMProvider()
    yield mock
    mock.calls.clear()


@pytest.fixture
def test_settings() -> Settings:
    """Settings for API tests: mock provider, no .env file."""
    return Settings(_env_file=None, llm_provider="mock", environment="test")


@pytest.fixture
def app(test_settings: Settings, mock_llm: MockLLMProvider) -> FastAPI:
    """Create a test application wired to the mock provider."""
    return create_app(settings=test_settings, provider=mock_llm)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
