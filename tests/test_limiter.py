import pytest

from conftest import make_results
from models.search import SearchBackend, SearchConfig, SearchResult
from tools.web.limiter import effective_limits, limit


@pytest.mark.unit
def test_eight_results_limited_to_first_five_in_order():
    results = make_results(8)
    limited = limit(results, max_count=5, max_size=400)
    assert len(limited) == 5
    assert [r.url for r in limited] == [r.url for r in results[:5]]


@pytest.mark.unit
@pytest.mark.parametrize("n,max_count,max_size", [(0, 5, 10), (3, 5, 4), (10, 1, 1), (7, 7, 1000), (4, 0, 10)])
def test_limit_bounds_count_size_and_keeps_prefix(n, max_count, max_size):
    results = make_results(n, text="a fairly long snippet of text")
    limited = limit(results, max_count, max_size)

    assert len(limited) <= max_count
    assert all(len(r.text_content) <= max_size for r in limited)
    for original, kept in zip(results, limited):
        assert kept.url == original.url
        assert original.text_content.startswith(kept.text_content)


@pytest.mark.unit
def test_limit_is_idempotent():
    results = make_results(9, text="x" * 50)
    once = limit(results, 4, 12)
    assert limit(once, 4, 12) == once


@pytest.mark.unit
def test_truncation_cuts_on_character_boundaries():
    result = SearchResult(site_name="s", text_content="héllo wörld 日本語テキスト", url="u")
    [cut] = limit([result], 5, 14)
    assert cut.text_content == "héllo wörld 日本"
    # Still valid text after a round trip through UTF-8
    assert cut.text_content.encode("utf-8").decode("utf-8") == cut.text_content


@pytest.mark.unit
def test_short_results_are_returned_unchanged():
    results = make_results(2)
    assert limit(results, 5, 400) == results


@pytest.mark.unit
def test_negative_limits_rejected():
    with pytest.raises(ValueError):
        limit(make_results(1), -1, 10)


@pytest.mark.unit
def test_server_fallback_applies_when_caller_sets_nothing():
    config = SearchConfig(backend=SearchBackend.TAVILY, api_key="k")
    assert effective_limits(config, 5, 400) == (5, 400)
    assert effective_limits(None, 5, 400) == (5, 400)


@pytest.mark.unit
def test_smaller_caller_limits_win():
    config = SearchConfig(
        backend=SearchBackend.TAVILY, api_key="k", max_search_results=2, size_limit_per_result=50
    )
    assert effective_limits(config, 5, 400) == (2, 50)


@pytest.mark.unit
def test_server_fallback_is_a_ceiling_for_larger_caller_limits():
    config = SearchConfig(
        backend=SearchBackend.BING, api_key="k", max_search_results=50, size_limit_per_result=10_000
    )
    assert effective_limits(config, 5, 400) == (5, 400)
