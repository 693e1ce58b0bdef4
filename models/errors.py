"""Pipeline error taxonomy.

Every failure a caller can observe derives from ``PipelineError`` and carries
a stable ``code`` plus the HTTP status the server answers with. Errors are
terminal for the request; nothing in the pipeline retries.
"""

from typing import Any


class PipelineError(Exception):
    code = "pipeline_error"
    status_code = 500

    def __init__(self, message: str, *, stage: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.stage:
            payload["stage"] = self.stage
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidQueryError(PipelineError):
    code = "invalid_query"
    status_code = 400


class ClassificationError(PipelineError):
    """The language model gave no usable search decision."""

    code = "classification_error"
    status_code = 502


class InvalidBackendConfig(PipelineError):
    code = "invalid_backend_config"
    status_code = 400


class SearchBackendError(PipelineError):
    """The provider call failed or returned malformed data."""

    code = "search_backend_error"
    status_code = 502


class NothingToSummarize(PipelineError):
    code = "nothing_to_summarize"
    status_code = 422


class SummarizationError(PipelineError):
    code = "summarization_error"
    status_code = 502


class ModeNotSupported(PipelineError):
    code = "mode_not_supported"
    status_code = 403


class PipelineTimeoutError(PipelineError, TimeoutError):
    code = "timeout"
    status_code = 504
