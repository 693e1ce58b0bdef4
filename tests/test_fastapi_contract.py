"""
FastAPI contract tests for the query endpoints.

The real orchestrator runs with a scripted language model and an in-memory
provider injected through dependency overrides, so no model server, search
API or network is needed. The tests pin the JSON shapes callers depend on
and the error codes that let them tell "model declined" from "pipeline broke".
"""

import pytest
from fastapi.testclient import TestClient

from config.config import OperatingMode, PipelineSettings
from conftest import FakeLLMClient, FakeProvider, build_orchestrator, decision_response, make_results, text_response
from server import dependencies as deps
from server.app import create_app

pytestmark = pytest.mark.integration

YES = {"search_required": True, "query": "What is the capital of France"}
NO = {"search_required": False}


def _client(orchestrator, mode=OperatingMode.LOCAL):
    deps.reset_singletons()
    app = create_app()
    app.dependency_overrides[deps.get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[deps.get_settings] = lambda: PipelineSettings(mode=mode)
    return TestClient(app)


@pytest.fixture(autouse=True)
def _no_api_keys(monkeypatch):
    monkeypatch.delenv("API_KEYS", raising=False)


def test_health_and_echo():
    client = _client(build_orchestrator(FakeLLMClient(), FakeProvider()), mode=OperatingMode.SERVER)

    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["mode"] == "server"

    r = client.get("/echo")
    assert r.status_code == 200
    assert r.text == "echo test"


def test_decide_scenario():
    client = _client(build_orchestrator(FakeLLMClient(decision_response(YES)), FakeProvider()))
    r = client.post("/query/decide", json={"query": "Whats the capital of france"})
    assert r.status_code == 200
    assert r.json() == {"decision": True, "query": "What is the capital of France"}
    assert r.headers["X-Request-ID"]


def test_decide_negative_returns_null_query():
    client = _client(build_orchestrator(FakeLLMClient(decision_response(NO)), FakeProvider()))
    r = client.post("/query/decide", json={"query": "What is 2 + 2?"})
    assert r.json() == {"decision": False, "query": None}


def test_complete_returns_limited_results():
    provider = FakeProvider(results=make_results(8))
    client = _client(build_orchestrator(FakeLLMClient(decision_response(YES)), provider))

    r = client.post(
        "/query/complete",
        json={
            "query": "Whats the capital of france",
            "backend": "tavily",
            "search_config": {"api_key": "tvly-key", "max_search_results": 5},
        },
    )

    assert r.status_code == 200
    body = r.json()
    assert body["decision"] is True
    assert body["query"] == "Whats the capital of france"
    assert len(body["results"]) == 5
    assert set(body["results"][0]) == {"site_name", "text_content", "url"}
    assert [item["url"] for item in body["results"]] == [res.url for res in make_results(5)]


def test_complete_negative_decision_has_no_results():
    provider = FakeProvider(results=make_results(3))
    client = _client(build_orchestrator(FakeLLMClient(decision_response(NO)), provider))
    r = client.post(
        "/query/complete", json={"query": "hi", "backend": "tavily", "search_config": {"api_key": "k"}}
    )
    assert r.status_code == 200
    assert r.json()["decision"] is False
    assert r.json()["results"] is None
    assert provider.calls == []


def test_unknown_backend_is_distinct_client_error():
    llm = FakeLLMClient()
    client = _client(build_orchestrator(llm, FakeProvider()))
    r = client.post("/query/complete", json={"query": "q", "backend": "yahoo", "search_config": {"api_key": "k"}})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "invalid_backend_config"
    assert llm.calls == []


def test_classification_failure_is_reported_not_masked():
    client = _client(build_orchestrator(FakeLLMClient(text_response("no tool call")), FakeProvider()))
    r = client.post("/query/decide", json={"query": "q"})
    assert r.status_code == 502
    assert r.json()["error"]["code"] == "classification_error"
    assert r.json()["error"]["stage"] == "deciding"


def test_search_failure_is_distinguishable_from_classification_failure():
    from models.errors import SearchBackendError

    provider = FakeProvider(error=SearchBackendError("upstream 500"))
    client = _client(build_orchestrator(FakeLLMClient(decision_response(YES)), provider))
    r = client.post("/query/complete", json={"query": "q", "backend": "tavily", "search_config": {"api_key": "k"}})
    assert r.status_code == 502
    assert r.json()["error"]["code"] == "search_backend_error"


def test_summarize_in_local_mode():
    llm = FakeLLMClient(decision_response(YES), text_response("1. Paris [1]."))
    client = _client(build_orchestrator(llm, FakeProvider(results=make_results(2))))
    r = client.post("/query/summarize", json={"query": "q", "backend": "tavily", "search_config": {"api_key": "k"}})
    assert r.status_code == 200
    assert r.json() == {"decision": True, "query": "q", "results": "1. Paris [1]."}


def test_summarize_refused_in_server_mode():
    llm = FakeLLMClient()
    orch = build_orchestrator(llm, FakeProvider(results=make_results(2)), mode=OperatingMode.SERVER)
    client = _client(orch, mode=OperatingMode.SERVER)
    r = client.post("/query/summarize", json={"query": "q", "backend": "tavily", "search_config": {"api_key": "k"}})
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "mode_not_supported"
    assert llm.calls == []


def test_summarize_with_no_results_is_error():
    client = _client(build_orchestrator(FakeLLMClient(decision_response(YES)), FakeProvider(results=[])))
    r = client.post("/query/summarize", json={"query": "q", "backend": "tavily", "search_config": {"api_key": "k"}})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "nothing_to_summarize"


@pytest.mark.parametrize("payload", [{}, {"query": ""}, {"query": 5}])
def test_malformed_request_body_is_validation_error(payload):
    llm = FakeLLMClient()
    client = _client(build_orchestrator(llm, FakeProvider()))
    r = client.post("/query/decide", json=payload)
    assert r.status_code == 422
    assert llm.calls == []


def test_blank_query_is_invalid_query():
    client = _client(build_orchestrator(FakeLLMClient(), FakeProvider()))
    r = client.post("/query/decide", json={"query": "   "})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "invalid_query"


def test_api_keys_enforced_when_configured(monkeypatch):
    monkeypatch.setenv("API_KEYS", "dev-key-1,dev-key-2")
    client = _client(build_orchestrator(FakeLLMClient(decision_response(NO)), FakeProvider()))

    r = client.post("/query/decide", json={"query": "q"})
    assert r.status_code == 401

    r = client.post("/query/decide", json={"query": "q"}, headers={"X-API-Key": "dev-key-2"})
    assert r.status_code == 200


def test_orchestrator_is_built_once_at_startup(clean_env):
    deps.reset_singletons()
    app = create_app()
    with TestClient(app) as client:
        built = deps.get_orchestrator._instance
        assert client.get("/health").status_code == 200
        assert deps.get_orchestrator() is built
    deps.reset_singletons()


def test_concurrent_first_requests_share_one_orchestrator(clean_env, monkeypatch):
    import threading
    import time
    from concurrent.futures import ThreadPoolExecutor

    from orchestrator.core import SearchOrchestrator

    built = []
    real_from_settings = SearchOrchestrator.from_settings

    def slow_from_settings(settings, client):
        time.sleep(0.05)
        built.append(threading.get_ident())
        return real_from_settings(settings, client)

    monkeypatch.setattr(SearchOrchestrator, "from_settings", slow_from_settings)
    deps.reset_singletons()

    with ThreadPoolExecutor(max_workers=8) as pool:
        instances = list(pool.map(lambda _: deps.get_orchestrator(), range(8)))

    assert len(built) == 1
    assert all(instance is instances[0] for instance in instances)
    deps.reset_singletons()


def test_model_timeout_reports_the_stage_that_timed_out():
    from models.errors import PipelineTimeoutError

    client = _client(build_orchestrator(FakeLLMClient(PipelineTimeoutError("slow backend")), FakeProvider()))
    r = client.post("/query/decide", json={"query": "q"})
    assert r.status_code == 504
    assert r.json()["error"]["code"] == "timeout"
    assert r.json()["error"]["stage"] == "deciding"
