#!/usr/bin/env python3
"""FastAPI server entry point for the search augmentation API."""

import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def _export(name: str, value) -> None:
    if value is not None:
        os.environ[name] = str(value)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Search Augmentation API Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8081, help="Port to bind to")
    parser.add_argument("--model-name", help="Model name sent to the inference backend")
    parser.add_argument("--llm-base-url", help="OpenAI-compatible endpoint of the inference backend")
    parser.add_argument(
        "--max-search-results",
        type=int,
        help="Fallback: maximum search results enforced when a query goes overboard",
    )
    parser.add_argument(
        "--size-per-search-result",
        type=int,
        help="Fallback: size limit per result enforced when a query goes overboard",
    )
    parser.add_argument(
        "--server",
        action="store_true",
        help="Serve remote callers: disables summarization and the local search server backend",
    )
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    # uvicorn builds the app in its own import; hand the flags over through the environment
    _export("LLM_MODEL_NAME", args.model_name)
    _export("LLM_BASE_URL", args.llm_base_url)
    _export("MAX_SEARCH_RESULTS", args.max_search_results)
    _export("SIZE_PER_SEARCH_RESULT", args.size_per_search_result)
    if args.server:
        os.environ["SERVER_MODE"] = "true"

    uvicorn.run(
        "server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )
