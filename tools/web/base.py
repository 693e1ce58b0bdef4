"""Base search provider interface."""

from abc import ABC, abstractmethod
from typing import Any

from models.errors import InvalidBackendConfig, SearchBackendError
from models.search import SearchBackend, SearchConfig, SearchResult


class SearchProvider(ABC):
    """
    Abstract base class for search providers.

    A provider owns its authentication, request shaping and response parsing.
    It returns results in the order the upstream API ranked them and never
    re-sorts them.
    """

    backend: SearchBackend
    requires_api_key: bool = True

    def validate(self, config: SearchConfig) -> None:
        """
        Check a per-request config before any network traffic.

        Raises:
            InvalidBackendConfig: the config names another backend or lacks a credential
        """
        if config.backend is not self.backend:
            raise InvalidBackendConfig(
                f"Config for '{config.backend.value}' given to the {self.backend.value} provider",
                stage="configuring",
            )
        if self.requires_api_key and not (config.api_key or "").strip():
            raise InvalidBackendConfig(
                f"No {self.backend.value} API key supplied", stage="configuring"
            )

    @abstractmethod
    async def search(self, query: str, config: SearchConfig, max_results: int) -> list[SearchResult]:
        """
        Search the web for a query.

        Args:
            query: Search query (already canonicalized)
            config: Per-request provider configuration
            max_results: Number of results to ask the provider for

        Returns:
            Results in provider relevance order

        Raises:
            SearchBackendError: network/API failure or malformed response
            PipelineTimeoutError: the provider call timed out
        """

    def _malformed(self, detail: str) -> SearchBackendError:
        return SearchBackendError(
            f"Malformed {self.backend.value} response: {detail}", stage="searching"
        )

    def _text(self, item: dict[str, Any], key: str) -> str:
        value = item.get(key)
        if value is None:
            return ""
        if not isinstance(value, str):
            raise self._malformed(f"field '{key}' is not a string")
        return value.strip()
