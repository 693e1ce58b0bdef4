"""
Models package: search pipeline data model, LLM responses and errors.
"""

from .errors import (
    ClassificationError,
    InvalidBackendConfig,
    InvalidQueryError,
    ModeNotSupported,
    NothingToSummarize,
    PipelineError,
    PipelineTimeoutError,
    SearchBackendError,
    SummarizationError,
)
from .llm_response import LLMResponse, TokenUsage, ToolCall
from .search import (
    DecisionOutcome,
    PipelineResponse,
    Query,
    SearchBackend,
    SearchConfig,
    SearchResult,
)

__all__ = [
    "ClassificationError",
    "DecisionOutcome",
    "InvalidBackendConfig",
    "InvalidQueryError",
    "LLMResponse",
    "ModeNotSupported",
    "NothingToSummarize",
    "PipelineError",
    "PipelineResponse",
    "PipelineTimeoutError",
    "Query",
    "SearchBackend",
    "SearchBackendError",
    "SearchConfig",
    "SearchResult",
    "SummarizationError",
    "TokenUsage",
    "ToolCall",
]
