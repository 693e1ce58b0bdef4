"""Search provider factory and per-request config parsing."""

from typing import Any

from config.config import OperatingMode
from models.errors import InvalidBackendConfig, ModeNotSupported
from models.search import SearchBackend, SearchConfig
from utils.logger import get_logger

from .base import SearchProvider
from .bing_client import BingSearchProvider
from .local_search_client import LocalSearchServerProvider
from .tavily_client import TavilySearchProvider

logger = get_logger(__name__)

_LIMIT_KEYS = ("max_search_results", "size_limit_per_result")


def _positive_int(raw: dict[str, Any], key: str) -> int | None:
    value = raw.get(key)
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidBackendConfig(f"'{key}' must be a positive integer", stage="configuring")
    return value


def build_search_config(backend: str | None, raw: dict[str, Any] | None) -> SearchConfig:
    """
    Turn the caller's ``backend`` and ``search_config`` object into a SearchConfig.

    Raises:
        InvalidBackendConfig: unknown backend, malformed credential or limits
    """
    parsed = SearchBackend.parse(backend)
    if parsed is None:
        raise InvalidBackendConfig(
            f"Unknown backend '{backend or ''}'. Usage: {', '.join(SearchBackend.names())}",
            stage="configuring",
        )

    raw = raw or {}
    if not isinstance(raw, dict):
        raise InvalidBackendConfig("search_config must be an object", stage="configuring")

    api_key = raw.get("api_key")
    if api_key is not None and not isinstance(api_key, str):
        raise InvalidBackendConfig(f"Invalid {parsed.value} API key supplied", stage="configuring")

    params = {k: v for k, v in raw.items() if k not in ("api_key", *_LIMIT_KEYS)}
    return SearchConfig(
        backend=parsed,
        api_key=api_key,
        max_search_results=_positive_int(raw, "max_search_results"),
        size_limit_per_result=_positive_int(raw, "size_limit_per_result"),
        params=params,
    )


class SearchProviderFactory:
    """
    Holds one provider instance per backend for the life of the process.

    Providers are stateless between requests; the factory is built once at
    startup and only read afterwards.
    """

    def __init__(self, providers: dict[SearchBackend, SearchProvider], mode: OperatingMode):
        self._providers = dict(providers)
        self.mode = mode

    @classmethod
    def default(cls, mode: OperatingMode, timeout_s: float = 15.0) -> "SearchProviderFactory":
        return cls(
            {
                SearchBackend.TAVILY: TavilySearchProvider(),
                SearchBackend.BING: BingSearchProvider(timeout_s=timeout_s),
                SearchBackend.LOCAL_SEARCH_SERVER: LocalSearchServerProvider(timeout_s=timeout_s),
            },
            mode=mode,
        )

    def resolve(self, config: SearchConfig) -> SearchProvider:
        """
        Pick and pre-validate the provider for a request. No network traffic happens here.

        Raises:
            ModeNotSupported: local search server requested in server mode
            InvalidBackendConfig: provider unavailable or config incomplete
        """
        if config.backend is SearchBackend.LOCAL_SEARCH_SERVER and not self.mode.allows_local_search_server:
            raise ModeNotSupported(
                "The local_search_server backend is only allowed on servers configured without --server",
                stage="configuring",
            )

        provider = self._providers.get(config.backend)
        if provider is None:
            raise InvalidBackendConfig(
                f"Backend '{config.backend.value}' is not enabled on this server", stage="configuring"
            )

        provider.validate(config)
        logger.debug("Resolved search provider", extra={"extra_fields": config.redacted()})
        return provider
