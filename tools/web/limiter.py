"""Result limiter: caps result count and per-result snippet size."""

from models.search import SearchConfig, SearchResult


def effective_limits(config: SearchConfig | None, max_count: int, max_size: int) -> tuple[int, int]:
    """
    Combine caller limits with the server fallbacks.

    The server values are ceilings: a caller may ask for fewer results or
    shorter snippets, never for more.
    """
    count, size = max_count, max_size
    if config is not None:
        if config.max_search_results is not None:
            count = min(count, config.max_search_results)
        if config.size_limit_per_result is not None:
            size = min(size, config.size_limit_per_result)
    return count, size


def limit(results: list[SearchResult], max_count: int, max_size: int) -> list[SearchResult]:
    """
    Keep the first ``max_count`` results and cut each snippet to ``max_size`` characters.

    Order is preserved and the cut happens on a character boundary, so
    ``limit(limit(x)) == limit(x)``.
    """
    if max_count < 0 or max_size < 0:
        raise ValueError("limits must not be negative")
    return [result.truncated(max_size) for result in results[:max_count]]
