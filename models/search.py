from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class SearchBackend(str, Enum):
    """Supported search providers, keyed by the identity callers send."""

    TAVILY = "tavily"
    BING = "bing"
    LOCAL_SEARCH_SERVER = "local_search_server"

    @classmethod
    def parse(cls, value: str | None) -> "SearchBackend | None":
        """Return the matching backend, or None when the identity is unknown."""
        normalized = (value or "").strip().lower()
        for backend in cls:
            if backend.value == normalized:
                return backend
        return None

    @classmethod
    def names(cls) -> list[str]:
        return [b.value for b in cls]


@dataclass(frozen=True)
class Query:
    """Raw caller input plus the rewritten form once the decision engine produced one."""

    text: str
    rewritten: str | None = None

    @property
    def search_text(self) -> str:
        return self.rewritten or self.text


@dataclass(frozen=True)
class SearchConfig:
    """Per-request provider configuration. Never persisted."""

    backend: SearchBackend
    api_key: str | None = None
    max_search_results: int | None = None
    size_limit_per_result: int | None = None
    params: dict[str, Any] = field(default_factory=dict)

    def redacted(self) -> dict[str, Any]:
        """Loggable view without the credential."""
        return {
            "backend": self.backend.value,
            "api_key": "[REDACTED]" if self.api_key else None,
            "max_search_results": self.max_search_results,
            "size_limit_per_result": self.size_limit_per_result,
            "params": sorted(self.params),
        }


@dataclass(frozen=True)
class SearchResult:
    """One item returned by a provider."""

    site_name: str
    text_content: str
    url: str

    def truncated(self, max_size: int) -> "SearchResult":
        if len(self.text_content) <= max_size:
            return self
        return replace(self, text_content=self.text_content[:max_size])


@dataclass(frozen=True)
class DecisionOutcome:
    """Classification result. ``query`` is present iff ``decision`` is true."""

    decision: bool
    query: str | None = None

    def __post_init__(self):
        if self.decision and not self.query:
            raise ValueError("a positive decision requires a canonicalized query")
        if not self.decision and self.query is not None:
            raise ValueError("a negative decision carries no query")


@dataclass(frozen=True)
class PipelineResponse:
    """
    Final payload for one request.

    ``results`` holds the limited result list for a completed search, the
    summary text for a summarized one, and None when no search was needed.
    """

    decision: bool
    query: str
    search_query: str | None = None
    results: list[SearchResult] | str | None = None
