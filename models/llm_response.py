from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, Optional

FinishReason = Optional[Literal["stop", "length", "tool_calls", "content_filter", "error"]]


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        if self.total_tokens == 0 and (self.prompt_tokens > 0 or self.completion_tokens > 0):
            object.__setattr__(self, "total_tokens", self.prompt_tokens + self.completion_tokens)


@dataclass(frozen=True)
class ToolCall:
    """A function call requested by the model. ``arguments`` is the raw JSON string."""

    name: str
    arguments: str
    type: str = "function"
    id: str = ""


@dataclass(frozen=True)
class LLMResponse:
    """Normalized chat completion from the language-model backend."""

    text: str | None
    model: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    finish_reason: FinishReason = None
    token_usage: TokenUsage = field(default_factory=TokenUsage)
    metadata: dict[str, Any] = field(default_factory=dict)

    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )

    def __post_init__(self):
        valid_reasons = {"stop", "length", "tool_calls", "content_filter", "error", None}
        if self.finish_reason not in valid_reasons:
            # keep the provider's reason for debugging instead of dropping it silently
            md = dict(self.metadata)
            md.setdefault("provider_finish_reason", self.finish_reason)
            object.__setattr__(self, "metadata", md)
            object.__setattr__(self, "finish_reason", None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text if not self.text or len(self.text) <= 200 else self.text[:200] + "...",
            "model": self.model,
            "tool_calls": [
                {"type": tc.type, "name": tc.name, "arguments": tc.arguments} for tc in self.tool_calls
            ],
            "finish_reason": self.finish_reason,
            "token_usage": {
                "prompt_tokens": self.token_usage.prompt_tokens,
                "completion_tokens": self.token_usage.completion_tokens,
                "total_tokens": self.token_usage.total_tokens,
            },
            "timestamp": self.timestamp,
        }
