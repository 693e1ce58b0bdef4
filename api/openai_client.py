import openai
from typing import Any

from models.errors import PipelineTimeoutError
from models.llm_response import FinishReason, LLMResponse, TokenUsage, ToolCall
from utils.logger import get_logger

from .base_client import BaseLLMClient

logger = get_logger(__name__)


class OpenAICompatibleClient(BaseLLMClient):
    """
    Chat client for any OpenAI-compatible inference server.

    Uses the OpenAI SDK with a custom base URL, so a local llama.cpp/LlamaEdge
    style server and hosted endpoints are driven the same way.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "not-needed",
        model_name: str = "default",
        timeout_s: float = 60.0,
        client: Any = None,
        **kwargs,
    ):
        """
        Args:
            base_url: Root of the OpenAI-compatible API (e.g. http://localhost:8080/v1)
            api_key: Key sent as bearer token; local servers usually ignore it
            model_name: Model identifier passed with every request
            timeout_s: Per-request timeout applied by the SDK
            client: Pre-built AsyncOpenAI-like object (tests)
        """
        super().__init__(model_name=model_name, **kwargs)
        self.base_url = base_url
        self.client = client or openai.AsyncOpenAI(
            api_key=api_key, base_url=base_url, timeout=timeout_s, max_retries=0
        )

    async def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | dict[str, Any] | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        request: dict[str, Any] = {
            "model": self.model_name,
            "messages": self._normalize_messages(messages),
            "stream": False,
            "n": 1,
        }
        if tools:
            request["tools"] = tools
        if tool_choice is not None:
            request["tool_choice"] = tool_choice
        if max_tokens is not None:
            request["max_tokens"] = max_tokens
        if temperature is not None:
            request["temperature"] = temperature

        logger.debug(
            "Chat completion request",
            extra={"extra_fields": {"model": self.model_name, "tools": len(tools or [])}},
        )

        try:
            response = await self.client.chat.completions.create(**request)
        except openai.APITimeoutError as e:
            raise PipelineTimeoutError(f"Language model did not answer in time: {e}") from e

        return self._to_llm_response(response)

    def _to_llm_response(self, response: Any) -> LLMResponse:
        if not getattr(response, "choices", None):
            return LLMResponse(text=None, model=getattr(response, "model", self.model_name))

        choice = response.choices[0]
        message = choice.message
        tool_calls = [
            ToolCall(
                id=getattr(tc, "id", "") or "",
                type=getattr(tc, "type", "function") or "function",
                name=tc.function.name,
                arguments=tc.function.arguments or "",
            )
            for tc in (getattr(message, "tool_calls", None) or [])
        ]

        usage = getattr(response, "usage", None)
        token_usage = TokenUsage(
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
            total_tokens=getattr(usage, "total_tokens", 0) or 0,
        )

        finish_reason: FinishReason = getattr(choice, "finish_reason", None)
        return LLMResponse(
            text=getattr(message, "content", None),
            model=getattr(response, "model", None) or self.model_name,
            tool_calls=tool_calls,
            finish_reason=finish_reason,
            token_usage=token_usage,
        )

    async def aclose(self) -> None:
        close = getattr(self.client, "close", None)
        if close is not None:
            await close()
