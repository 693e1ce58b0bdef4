"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from models.errors import PipelineError
from server import dependencies
from server.middleware import RequestIDMiddleware
from server.routes import health, query
from server.utils import pipeline_error_response
from utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup/shutdown logic."""
    overrides = app.dependency_overrides
    settings = overrides.get(dependencies.get_settings, dependencies.get_settings)()
    orchestrator = overrides.get(dependencies.get_orchestrator, dependencies.get_orchestrator)()
    logger.info(
        "Search server starting up",
        extra={
            "extra_fields": {
                "mode": settings.mode.value,
                "max_search_results": settings.max_search_results,
                "size_per_search_result": settings.size_per_search_result,
                "llm_max_concurrency": settings.llm_max_concurrency,
            }
        },
    )

    yield

    await orchestrator.decision_engine.gate.client.aclose()
    logger.info("Search server shutting down")


async def handle_pipeline_error(request: Request, exc: PipelineError):
    return pipeline_error_response(request, exc)


def create_app() -> FastAPI:
    """Factory function to create FastAPI application."""
    app = FastAPI(
        title="Search Augmentation API",
        description="Decides whether a query needs a web search, runs it and optionally summarizes it",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PipelineError, handle_pipeline_error)

    app.include_router(health.router)
    app.include_router(query.router)

    return app
