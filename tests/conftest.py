import json
import os
from typing import Any

import pytest
from dotenv import load_dotenv

from api.base_client import BaseLLMClient
from config.config import OperatingMode, PipelineSettings
from models.llm_response import LLMResponse, ToolCall
from models.search import SearchBackend, SearchConfig, SearchResult
from orchestrator.core import SearchOrchestrator
from tools.web.base import SearchProvider
from tools.web.factory import SearchProviderFactory

# Load environment variables from .env file for tests
load_dotenv()


# -------------------------------------------------------------------
# Fakes (keep tests offline & deterministic)
# -------------------------------------------------------------------


def decision_response(arguments: Any, name: str = "search_required") -> LLMResponse:
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return LLMResponse(
        text=None,
        model="fake-model",
        tool_calls=[ToolCall(name=name, arguments=raw)],
        finish_reason="tool_calls",
    )


def text_response(text: str | None) -> LLMResponse:
    return LLMResponse(text=text, model="fake-model", finish_reason="stop")


class FakeLLMClient(BaseLLMClient):
    """Replays scripted responses; an Exception in the script is raised instead."""

    def __init__(self, *responses):
        super().__init__(model_name="fake-model")
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def chat(self, messages, *, tools=None, tool_choice=None, max_tokens=None, temperature=None):
        self.calls.append(
            {"messages": messages, "tools": tools, "tool_choice": tool_choice, "max_tokens": max_tokens}
        )
        if not self.responses:
            raise AssertionError("FakeLLMClient ran out of scripted responses")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FakeProvider(SearchProvider):
    """In-memory provider for one backend."""

    def __init__(self, backend=SearchBackend.TAVILY, results=None, error: Exception | None = None, requires_api_key=True):
        self.backend = backend
        self.requires_api_key = requires_api_key
        self.results = results or []
        self.error = error
        self.calls: list[tuple[str, SearchConfig, int]] = []

    async def search(self, query, config, max_results):
        self.calls.append((query, config, max_results))
        if self.error is not None:
            raise self.error
        return list(self.results)


def make_results(n: int, text: str = "snippet text") -> list[SearchResult]:
    return [
        SearchResult(site_name=f"Site {i}", text_content=f"{text} {i}", url=f"https://example.com/{i}")
        for i in range(n)
    ]


def build_orchestrator(
    llm: FakeLLMClient,
    provider: FakeProvider | None = None,
    *,
    mode: OperatingMode = OperatingMode.LOCAL,
    **settings_overrides,
) -> SearchOrchestrator:
    settings = PipelineSettings(mode=mode, **settings_overrides)
    provider = provider or FakeProvider()
    factory = SearchProviderFactory({provider.backend: provider}, mode=mode)
    return SearchOrchestrator.from_settings(settings, llm, providers=factory)


# -------------------------------------------------------------------
# Pytest fixtures
# -------------------------------------------------------------------


@pytest.fixture
def tavily_config():
    return {"api_key": "tvly-test-key"}


@pytest.fixture
def clean_env(monkeypatch):
    """Remove pipeline-related variables so defaults apply."""
    for key in list(os.environ):
        if key.startswith(("LLM_", "SEARCH_", "MAX_SEARCH", "SIZE_PER", "SERVER_MODE", "API_KEYS")):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
