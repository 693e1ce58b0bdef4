"""Pydantic request models for FastAPI endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class DecideRequest(BaseModel):
    query: str = Field(..., min_length=1)
    # Accepted for symmetry with the search endpoints; a decision never uses them
    backend: Optional[str] = None
    search_config: Optional[dict[str, Any]] = None


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    # Free-form on purpose: unknown backends are a pipeline error, not a schema error
    backend: Optional[str] = None
    search_config: Optional[dict[str, Any]] = None
