"""Health check and echo endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from config.config import PipelineSettings
from server.dependencies import get_settings
from server.schemas.responses import HealthResponseDTO

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponseDTO)
async def health_check(settings: PipelineSettings = Depends(get_settings)):
    """Health check endpoint."""
    return HealthResponseDTO(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        mode=settings.mode.value,
    )


@router.get("/echo", response_class=PlainTextResponse)
async def echo():
    """Liveness probe kept for clients of the original server."""
    return "echo test"
