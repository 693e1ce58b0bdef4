"""
SearchOrchestrator - control flow for one query-augmentation request.

Stages per request:
    start -> deciding -> no_search_needed
                      -> searching -> limiting -> done [-> summarizing -> done]
    any stage -> failed

Key guarantees:
- Provider config is validated before the model or the network is touched
- A negative decision never reaches a provider
- Failures are all-or-nothing: the first error ends the request and is raised
- Nothing here is mutated per request; concurrent requests share only the
  read-only settings, provider factory and inference gate
"""

import asyncio
import time
import uuid
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from api.base_client import BaseLLMClient
from config.config import PipelineSettings
from models.errors import PipelineError, PipelineTimeoutError, SearchBackendError
from models.search import DecisionOutcome, PipelineResponse, Query, SearchConfig, SearchResult
from tools.web.base import SearchProvider
from tools.web.factory import SearchProviderFactory, build_search_config
from tools.web.limiter import effective_limits, limit
from utils.logger import get_logger

from .decision_engine import DecisionEngine
from .inference_gate import InferenceGate
from .summarizer import Summarizer

logger = get_logger(__name__)

T = TypeVar("T")


class PipelineStage(str, Enum):
    START = "start"
    CONFIGURING = "configuring"
    DECIDING = "deciding"
    NO_SEARCH_NEEDED = "no_search_needed"
    SEARCHING = "searching"
    LIMITING = "limiting"
    SUMMARIZING = "summarizing"
    DONE = "done"
    FAILED = "failed"


class _RequestTrace:
    """Logs stage transitions of one request under a shared request id."""

    def __init__(self, kind: str, request_id: str | None = None):
        self.kind = kind
        self.request_id = request_id or str(uuid.uuid4())
        self.stage = PipelineStage.START
        self._started = time.monotonic()

    def enter(self, stage: PipelineStage, **fields: Any) -> None:
        self.stage = stage
        logger.info(
            f"{self.kind}: {stage.value}",
            extra={
                "extra_fields": {
                    "request_id": self.request_id,
                    "stage": stage.value,
                    "elapsed_ms": int((time.monotonic() - self._started) * 1000),
                    **fields,
                }
            },
        )

    def fail(self, error: PipelineError) -> None:
        failed_in = self.stage.value
        if error.stage is None:
            error.stage = failed_in
        self.stage = PipelineStage.FAILED
        logger.warning(
            f"{self.kind}: failed in {failed_in}: {error.message}",
            extra={
                "extra_fields": {
                    "request_id": self.request_id,
                    "stage": PipelineStage.FAILED.value,
                    "failed_stage": failed_in,
                    "error_code": error.code,
                }
            },
        )


class SearchOrchestrator:
    def __init__(
        self,
        settings: PipelineSettings,
        decision_engine: DecisionEngine,
        providers: SearchProviderFactory,
        summarizer: Summarizer,
    ):
        self.settings = settings
        self.decision_engine = decision_engine
        self.providers = providers
        self.summarizer = summarizer

    @classmethod
    def from_settings(
        cls,
        settings: PipelineSettings,
        llm_client: BaseLLMClient,
        providers: SearchProviderFactory | None = None,
    ) -> "SearchOrchestrator":
        """Wire the pipeline around one shared model handle."""
        gate = InferenceGate(
            llm_client,
            max_concurrency=settings.llm_max_concurrency,
            timeout_s=settings.llm_timeout_s,
        )
        return cls(
            settings=settings,
            decision_engine=DecisionEngine(gate),
            providers=providers
            or SearchProviderFactory.default(settings.mode, timeout_s=settings.search_timeout_s),
            summarizer=Summarizer(gate, settings.mode),
        )

    # ---------- public operations ----------

    async def decide(self, query: str, *, request_id: str | None = None) -> DecisionOutcome:
        """Decision only: no provider is contacted."""
        trace = _RequestTrace("decide", request_id)
        return await self._guard(trace, lambda: self._decide(trace, query))

    async def complete(
        self,
        query: str,
        backend: str | None,
        search_config: dict[str, Any] | None = None,
        *,
        request_id: str | None = None,
    ) -> PipelineResponse:
        """Decide, then search and limit when a search is needed."""
        trace = _RequestTrace("complete", request_id)
        return await self._guard(trace, lambda: self._complete(trace, query, backend, search_config))

    async def summarize(
        self,
        query: str,
        backend: str | None,
        search_config: dict[str, Any] | None = None,
        *,
        request_id: str | None = None,
    ) -> PipelineResponse:
        """Like ``complete`` but the results are replaced by a model-written summary."""
        trace = _RequestTrace("summarize", request_id)

        async def run() -> PipelineResponse:
            # Gate first: a disabled summarizer must not cost a decision call
            self.summarizer.ensure_enabled()
            response = await self._complete(trace, query, backend, search_config, finish=False)
            if not response.decision:
                trace.enter(PipelineStage.DONE, decision=False)
                return response

            trace.enter(PipelineStage.SUMMARIZING, result_count=len(response.results or []))
            summary = await self.summarizer.summarize(query, response.results or [])
            trace.enter(PipelineStage.DONE, decision=True, summary_chars=len(summary))
            return PipelineResponse(
                decision=True,
                query=response.query,
                search_query=response.search_query,
                results=summary,
            )

        return await self._guard(trace, run)

    # ---------- stages ----------

    async def _guard(self, trace: _RequestTrace, run: Callable[[], Awaitable[T]]) -> T:
        try:
            return await run()
        except PipelineError as e:
            trace.fail(e)
            raise

    async def _decide(self, trace: _RequestTrace, query: str) -> DecisionOutcome:
        trace.enter(PipelineStage.DECIDING)
        outcome = await self.decision_engine.decide(query)
        if not outcome.decision:
            trace.enter(PipelineStage.NO_SEARCH_NEEDED, decision=False)
        else:
            trace.enter(PipelineStage.DONE, decision=True)
        return outcome

    async def _complete(
        self,
        trace: _RequestTrace,
        query: str,
        backend: str | None,
        search_config: dict[str, Any] | None,
        finish: bool = True,
    ) -> PipelineResponse:
        trace.enter(PipelineStage.CONFIGURING, backend=backend)
        config = build_search_config(backend, search_config)
        provider = self.providers.resolve(config)

        trace.enter(PipelineStage.DECIDING)
        outcome = await self.decision_engine.decide(query)
        if not outcome.decision:
            trace.enter(PipelineStage.NO_SEARCH_NEEDED, decision=False)
            return PipelineResponse(decision=False, query=query, results=None)

        request_query = Query(text=query, rewritten=outcome.query)
        max_count, max_size = effective_limits(
            config, self.settings.max_search_results, self.settings.size_per_search_result
        )

        trace.enter(PipelineStage.SEARCHING, backend=config.backend.value, max_results=max_count)
        results = await self._search(provider, request_query.search_text, config, max_count)

        trace.enter(PipelineStage.LIMITING, returned=len(results), max_count=max_count, max_size=max_size)
        limited = limit(results, max_count, max_size)

        if finish:
            trace.enter(PipelineStage.DONE, decision=True, result_count=len(limited))
        return PipelineResponse(
            decision=True,
            query=request_query.text,
            search_query=request_query.search_text,
            results=limited,
        )

    async def _search(
        self, provider: SearchProvider, query: str, config: SearchConfig, max_results: int
    ) -> list[SearchResult]:
        timeout_s = self.settings.search_timeout_s
        try:
            return await asyncio.wait_for(provider.search(query, config, max_results), timeout=timeout_s)
        except PipelineError:
            raise
        except asyncio.TimeoutError as e:
            raise PipelineTimeoutError(
                f"Search provider did not answer within {timeout_s:g}s", stage="searching"
            ) from e
        except Exception as e:
            logger.error(f"Search provider raised unexpectedly: {e}", exc_info=True)
            raise SearchBackendError(
                f"Failed to perform internet search: {e}",
                stage="searching",
                details={"error_type": type(e).__name__},
            ) from e
