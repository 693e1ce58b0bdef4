"""Tavily search provider.

Tavily returns extracted page content per hit, so the snippet handed to the
limiter is already clean text.
"""

import asyncio
from collections.abc import Callable
from typing import Any

import httpx

from models.errors import PipelineTimeoutError, SearchBackendError
from models.search import SearchBackend, SearchConfig, SearchResult
from utils.logger import get_logger

from .base import SearchProvider

logger = get_logger(__name__)


def _default_client_factory(api_key: str) -> Any:
    # Lazy import so the other providers work without tavily installed
    try:
        from tavily import AsyncTavilyClient
    except ModuleNotFoundError as e:
        raise ModuleNotFoundError(
            "Dependency 'tavily' is not installed. "
            "Install it to enable the tavily backend: pip install tavily-python"
        ) from e

    return AsyncTavilyClient(api_key=api_key)


class TavilySearchProvider(SearchProvider):
    """Tavily API search provider."""

    backend = SearchBackend.TAVILY
    requires_api_key = True

    def __init__(self, client_factory: Callable[[str], Any] | None = None, search_depth: str = "advanced"):
        """
        Args:
            client_factory: Builds an AsyncTavilyClient-like object from an API key
            search_depth: "basic" (faster) or "advanced" (deeper)
        """
        self._client_factory = client_factory or _default_client_factory
        self.search_depth = search_depth

    async def search(self, query: str, config: SearchConfig, max_results: int) -> list[SearchResult]:
        self.validate(config)
        client = self._client_factory(config.api_key)

        logger.info(
            "Tavily search",
            extra={"extra_fields": {"max_results": max_results, "depth": self.search_depth}},
        )

        try:
            response = await client.search(
                query=query,
                max_results=max_results,
                search_depth=self.search_depth,
                include_answer=False,
                include_images=False,
                include_raw_content=False,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise PipelineTimeoutError("Tavily search timed out", stage="searching") from e
        except Exception as e:
            raise SearchBackendError(
                f"Tavily search failed: {e}",
                stage="searching",
                details={"error_type": type(e).__name__},
            ) from e

        return self.parse(response)

    def parse(self, response: Any) -> list[SearchResult]:
        if not isinstance(response, dict):
            raise self._malformed("body is not a JSON object")
        items = response.get("results")
        if items is None:
            raise self._malformed("no 'results' field")
        if not isinstance(items, list):
            raise self._malformed("'results' is not a list")

        results = []
        for item in items:
            if not isinstance(item, dict):
                raise self._malformed("result entry is not an object")
            results.append(
                SearchResult(
                    site_name=self._text(item, "title"),
                    text_content=self._text(item, "content"),
                    url=self._text(item, "url"),
                )
            )

        logger.info(f"Tavily returned {len(results)} results")
        return results
