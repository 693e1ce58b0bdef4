"""Bing Web Search (v7) provider."""

from typing import Any

import httpx

from models.errors import PipelineTimeoutError, SearchBackendError
from models.search import SearchBackend, SearchConfig, SearchResult
from utils.logger import get_logger

from .base import SearchProvider

logger = get_logger(__name__)

BING_SEARCH_URL = "https://api.bing.microsoft.com/v7.0/search"
DEFAULT_TIMEOUT_S = 15.0


class HttpSearchProvider(SearchProvider):
    """Shared plumbing for providers spoken to over plain HTTP with httpx."""

    def __init__(self, timeout_s: float = DEFAULT_TIMEOUT_S, transport: httpx.AsyncBaseTransport | None = None):
        self.timeout_s = timeout_s
        self._transport = transport

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        name = self.backend.value
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                if not response.content:
                    raise self._malformed("empty body")
                return response.json()
        except httpx.TimeoutException as e:
            raise PipelineTimeoutError(f"{name} search timed out", stage="searching") from e
        except httpx.HTTPStatusError as e:
            raise SearchBackendError(
                f"{name} search failed with HTTP {e.response.status_code}",
                stage="searching",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise SearchBackendError(
                f"{name} search failed: {e}",
                stage="searching",
                details={"error_type": type(e).__name__},
            ) from e
        except ValueError as e:
            raise self._malformed("body is not valid JSON") from e

    def parse_web_pages(self, payload: Any) -> list[SearchResult]:
        """Parse a Bing-shaped ``webPages.value`` payload."""
        if not isinstance(payload, dict):
            raise self._malformed("body is not a JSON object")
        web_pages = payload.get("webPages")
        if web_pages is None:
            # Bing omits webPages entirely when nothing matched
            return []
        if not isinstance(web_pages, dict) or not isinstance(web_pages.get("value", []), list):
            raise self._malformed("'webPages.value' is not a list")

        results = []
        for item in web_pages.get("value", []):
            if not isinstance(item, dict):
                raise self._malformed("result entry is not an object")
            results.append(
                SearchResult(
                    site_name=self._text(item, "name"),
                    text_content=self._text(item, "snippet"),
                    url=self._text(item, "url"),
                )
            )
        return results


class BingSearchProvider(HttpSearchProvider):
    """Bing Web Search API provider. The key travels in a request header."""

    backend = SearchBackend.BING
    requires_api_key = True

    def __init__(self, endpoint: str = BING_SEARCH_URL, **kwargs):
        super().__init__(**kwargs)
        self.endpoint = endpoint

    async def search(self, query: str, config: SearchConfig, max_results: int) -> list[SearchResult]:
        self.validate(config)
        logger.info("Bing search", extra={"extra_fields": {"max_results": max_results}})

        payload = await self._request(
            "GET",
            self.endpoint,
            params={"q": query, "count": max_results, "responseFilter": "Webpages"},
            headers={"Ocp-Apim-Subscription-Key": config.api_key.strip()},
        )
        results = self.parse_web_pages(payload)
        logger.info(f"Bing returned {len(results)} results")
        return results
