"""Bounded access to the single shared language-model handle."""

import asyncio
from typing import Any

from api.base_client import BaseLLMClient
from models.errors import PipelineTimeoutError
from models.llm_response import LLMResponse
from utils.logger import get_logger

logger = get_logger(__name__)


class InferenceGate:
    """
    Serializes calls into one inference backend.

    ``max_concurrency`` permits are shared by all requests; callers queue on
    the semaphore in arrival order. Only model calls pass through here, so
    provider traffic of other requests is never held up by a busy model.
    Queue wait counts against the timeout.
    """

    def __init__(self, client: BaseLLMClient, max_concurrency: int = 1, timeout_s: float = 60.0):
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")
        self.client = client
        self.timeout_s = timeout_s
        self.max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def _run(self, messages: list[dict[str, Any]], **kwargs) -> LLMResponse:
        async with self._semaphore:
            return await self.client.chat(messages, **kwargs)

    async def chat(self, messages: list[dict[str, Any]], *, stage: str, **kwargs) -> LLMResponse:
        try:
            return await asyncio.wait_for(self._run(messages, **kwargs), timeout=self.timeout_s)
        except PipelineTimeoutError as e:
            # Client-side timeouts carry no stage of their own
            if e.stage is None:
                e.stage = stage
            raise
        except asyncio.TimeoutError as e:
            logger.error(
                "Inference call timed out",
                extra={"extra_fields": {"stage": stage, "timeout_s": self.timeout_s}},
            )
            raise PipelineTimeoutError(
                f"Language model did not answer within {self.timeout_s:g}s", stage=stage
            ) from e
