"""Query endpoints: decide, complete and summarize."""

from fastapi import APIRouter, Depends, Request

from orchestrator.core import SearchOrchestrator
from server.dependencies import get_api_key, get_orchestrator
from server.schemas.requests import DecideRequest, SearchRequest
from server.schemas.responses import (
    CompleteResponseDTO,
    DecideResponseDTO,
    ErrorResponseDTO,
    SummarizeResponseDTO,
)
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/query", tags=["Query"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponseDTO},
    403: {"model": ErrorResponseDTO},
    422: {"model": ErrorResponseDTO},
    502: {"model": ErrorResponseDTO},
    504: {"model": ErrorResponseDTO},
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@router.post("/decide", response_model=DecideResponseDTO, responses=_ERROR_RESPONSES)
async def decide(
    body: DecideRequest,
    request: Request,
    api_key: str | None = Depends(get_api_key),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Return whether the query needs an internet search, and the query to search for."""
    outcome = await orchestrator.decide(body.query, request_id=_request_id(request))
    return DecideResponseDTO.from_outcome(outcome)


@router.post("/complete", response_model=CompleteResponseDTO, responses=_ERROR_RESPONSES)
async def complete(
    body: SearchRequest,
    request: Request,
    api_key: str | None = Depends(get_api_key),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Decide, and run the search through the requested backend when needed."""
    response = await orchestrator.complete(
        body.query, body.backend, body.search_config, request_id=_request_id(request)
    )
    return CompleteResponseDTO.from_pipeline_response(response)


@router.post("/summarize", response_model=SummarizeResponseDTO, responses=_ERROR_RESPONSES)
async def summarize(
    body: SearchRequest,
    request: Request,
    api_key: str | None = Depends(get_api_key),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Decide, search and return a summary of the results. Local mode only."""
    response = await orchestrator.summarize(
        body.query, body.backend, body.search_config, request_id=_request_id(request)
    )
    return SummarizeResponseDTO.from_pipeline_response(response)
