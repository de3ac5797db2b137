from typing import List

import pytest
from fastapi.testclient import TestClient

from market_signal.app.main import app as fastapi_app
from market_signal.app.schemas import NewsArticle
from market_signal.app.settings import settings
from mocks import RecordingLLM


@pytest.fixture(autouse=True)
def _offline_settings(monkeypatch):
    """Fake keys and no retry sleeps for every test."""
    monkeypatch.setattr(settings, "news_api_key", "test-news-key")
    monkeypatch.setattr(settings, "openai_api_key", "test-openai-key")
    monkeypatch.setattr(settings, "secrets_manager_secret_name", None)
    monkeypatch.setattr(settings, "fetch_max_retries", 0)
    monkeypatch.setattr(settings, "retry_initial_delay", 0.0)
    monkeypatch.setattr(settings, "retry_max_delay", 0.0)
    monkeypatch.setattr(settings, "disconnect_poll_interval", 0.05)


@pytest.fixture
def client():
    return TestClient(fastapi_app)


@pytest.fixture
def stub_news(monkeypatch):
    """Replace the news fetcher used by the workflow; returns an installer."""
    from market_signal.orchestration.nodes import fetch_news as node

    def _install(articles: List[NewsArticle] | None = None, error: Exception | None = None) -> List[str]:
        seen: List[str] = []

        async def fake_fetch_news(company_name: str):
            seen.append(company_name)
            if error is not None:
                raise error
            return list(articles or [])

        monkeypatch.setattr(node, "fetch_news", fake_fetch_news)
        return seen

    return _install


@pytest.fixture
def stub_llm(monkeypatch):
    from market_signal.orchestration.nodes import generate

    def _install(responses: List[str] | None = None, error: Exception | None = None) -> RecordingLLM:
        fake = RecordingLLM(responses=responses, error=error)
        monkeypatch.setattr(generate, "_llm", fake)
        return fake

    return _install
