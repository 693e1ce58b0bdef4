"""Web search providers and result limiting."""

from .base import SearchProvider
from .bing_client import BingSearchProvider
from .factory import SearchProviderFactory, build_search_config
from .limiter import effective_limits, limit
from .local_search_client import LocalSearchServerProvider
from .tavily_client import TavilySearchProvider

__all__ = [
    "BingSearchProvider",
    "LocalSearchServerProvider",
    "SearchProvider",
    "SearchProviderFactory",
    "TavilySearchProvider",
    "build_search_config",
    "effective_limits",
    "limit",
]
