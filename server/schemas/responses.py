"""Pydantic response models (DTOs) for FastAPI endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class SearchResultDTO(BaseModel):
    site_name: str
    text_content: str
    url: str


class DecideResponseDTO(BaseModel):
    decision: bool
    query: str | None = None

    @classmethod
    def from_outcome(cls, outcome):
        return cls(decision=outcome.decision, query=outcome.query)


class CompleteResponseDTO(BaseModel):
    decision: bool
    query: str
    results: list[SearchResultDTO] | None = None

    @classmethod
    def from_pipeline_response(cls, pr):
        """Convert a PipelineResponse carrying a result list."""
        results = None
        if isinstance(pr.results, list):
            results = [
                SearchResultDTO(site_name=r.site_name, text_content=r.text_content, url=r.url)
                for r in pr.results
            ]
        return cls(decision=pr.decision, query=pr.query, results=results)


class SummarizeResponseDTO(BaseModel):
    decision: bool
    query: str
    results: str | None = None

    @classmethod
    def from_pipeline_response(cls, pr):
        return cls(
            decision=pr.decision,
            query=pr.query,
            results=pr.results if isinstance(pr.results, str) else None,
        )


class ErrorDTO(BaseModel):
    code: str
    message: str
    stage: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponseDTO(BaseModel):
    error: ErrorDTO


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    mode: str
    version: str = "1.0.0"
