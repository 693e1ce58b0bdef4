"""Self-hosted search proxy provider.

Talks to a search server running next to the user (for example a small
Google scraping proxy). It answers in the Bing ``webPages`` shape and needs no
credential, which is why it is only offered in local operating mode.
"""

from models.errors import InvalidBackendConfig
from models.search import SearchBackend, SearchConfig, SearchResult
from utils.logger import get_logger

from .bing_client import HttpSearchProvider

logger = get_logger(__name__)

DEFAULT_LOCAL_SEARCH_URL = "http://localhost:3000/search"


class LocalSearchServerProvider(HttpSearchProvider):
    backend = SearchBackend.LOCAL_SEARCH_SERVER
    requires_api_key = False

    def __init__(self, engine: str = "google", **kwargs):
        super().__init__(**kwargs)
        self.engine = engine

    def validate(self, config: SearchConfig) -> None:
        super().validate(config)
        endpoint = config.params.get("endpoint", DEFAULT_LOCAL_SEARCH_URL)
        if not isinstance(endpoint, str) or not endpoint.startswith(("http://", "https://")):
            raise InvalidBackendConfig(
                "local_search_server endpoint must be an http(s) URL", stage="configuring"
            )

    async def search(self, query: str, config: SearchConfig, max_results: int) -> list[SearchResult]:
        self.validate(config)
        endpoint = config.params.get("endpoint", DEFAULT_LOCAL_SEARCH_URL)
        logger.info(
            "Local search server query",
            extra={"extra_fields": {"endpoint": endpoint, "max_results": max_results}},
        )

        payload = await self._request(
            "POST",
            endpoint,
            json={"term": query, "engine": self.engine, "maxSearchResults": max_results},
        )
        return self.parse_web_pages(payload)
