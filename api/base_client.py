from abc import ABC, abstractmethod
from typing import Any

from models.llm_response import LLMResponse


class BaseLLMClient(ABC):
    """
    Abstract base class for language-model backends.
    The pipeline only relies on ``chat``; everything about how inference is
    run (local server, hosted API) stays behind this interface.
    """

    def __init__(self, model_name: str = "default", **kwargs):
        self.model_name = model_name

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | dict[str, Any] | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """
        Run one non-streaming chat completion.

        Args:
            messages: OpenAI-style message dicts with 'role' and 'content'
            tools: Function tool schemas offered to the model
            tool_choice: Forces a specific tool when given
            max_tokens: Upper bound on generated tokens
            temperature: Sampling temperature

        Returns:
            LLMResponse: Normalized completion
        """

    async def aclose(self) -> None:
        """Release network resources held by the client."""
        return None

    @staticmethod
    def _normalize_messages(messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Check every message has a role and content; return a copy of the list."""
        if not messages:
            raise ValueError("At least one message is required")
        for msg in messages:
            if not isinstance(msg, dict) or "role" not in msg or "content" not in msg:
                raise ValueError("Each message must be a dict with 'role' and 'content' keys")
        return list(messages)
