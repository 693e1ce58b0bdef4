"""Shared utilities for FastAPI routes."""

from collections.abc import Mapping

from fastapi import Request
from fastapi.responses import JSONResponse

from models.errors import PipelineError

SENSITIVE_HEADERS = {"x-api-key", "authorization", "ocp-apim-subscription-key"}


def redact_sensitive_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """
    Redact auth-bearing headers before logging.
    """
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS and value:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted


def pipeline_error_response(request: Request, exc: PipelineError) -> JSONResponse:
    """Render a pipeline failure as ``{"error": {...}}`` with its own status code."""
    headers = {}
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers["X-Request-ID"] = request_id
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()}, headers=headers)
