"""
Pytest configuration and fixtures
"""
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from inkparse.config import Settings
from inkparse.deps import get_llm_service
from inkparse.main import create_app


class FakeLLM:
    """Stands in for LLMService: records messages, returns a canned reply or raises."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.reply: str = "{}"
        self.exc: Optional[Exception] = None
        self.calls: List[List[Dict[str, Any]]] = []

    async def complete(self, messages: List[Dict[str, Any]]) -> str:
        self.calls.append(messages)
        if self.exc is not None:
            raise self.exc
        return self.reply


@pytest.fixture
def settings(monkeypatch) -> Settings:
    """Settings built from a clean, test-only environment."""
    for name in (
        "CORS_ORIGINS",
        "CORS_ORIGIN_REGEX",
        "MAX_IMAGES",
        "MAX_BODY_MB",
        "OPENAI_MODEL",
        "OPENAI_BASE_URL",
        "LLM_MAX_OUTPUT_TOKENS",
        "LLM_IMAGE_DETAIL",
        "LLM_PROMPT_VERSION",
        "KEEPALIVE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("KEEPALIVE_ENABLE", "false")
    return Settings()


@pytest.fixture
def fake_llm(settings) -> FakeLLM:
    return FakeLLM(settings)


@pytest.fixture
def app(settings, fake_llm):
    application = create_app(settings)
    application.dependency_overrides[get_llm_service] = lambda: fake_llm
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
