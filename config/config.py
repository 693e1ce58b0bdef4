import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

# Server-side fallbacks applied when a caller does not ask for tighter limits
DEFAULT_MAX_SEARCH_RESULTS = 5
DEFAULT_SIZE_PER_SEARCH_RESULT = 400


class OperatingMode(Enum):
    """Process-wide operating mode."""
    LOCAL = "local"
    SERVER = "server"

    @property
    def allows_summarization(self) -> bool:
        return self is OperatingMode.LOCAL

    @property
    def allows_local_search_server(self) -> bool:
        return self is OperatingMode.LOCAL


@dataclass(frozen=True)
class PipelineSettings:
    """
    Immutable settings shared by every request.

    Built once at startup and handed to the orchestrator and summarizer.
    """
    mode: OperatingMode = OperatingMode.LOCAL
    max_search_results: int = DEFAULT_MAX_SEARCH_RESULTS
    size_per_search_result: int = DEFAULT_SIZE_PER_SEARCH_RESULT
    llm_timeout_s: float = 60.0
    search_timeout_s: float = 15.0
    llm_max_concurrency: int = 1
    model_name: str = "default"

    def __post_init__(self):
        if self.max_search_results <= 0:
            raise ValueError("max_search_results must be positive")
        if self.size_per_search_result <= 0:
            raise ValueError("size_per_search_result must be positive")
        if self.llm_timeout_s <= 0 or self.search_timeout_s <= 0:
            raise ValueError("timeouts must be positive")
        if self.llm_max_concurrency <= 0:
            raise ValueError("llm_max_concurrency must be positive")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Config:
    """Configuration management for the application."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Language model backend (OpenAI-compatible chat endpoint)
        self.LLM_BASE_URL = os.getenv('LLM_BASE_URL', 'http://localhost:8080/v1')
        self.LLM_API_KEY = os.getenv('LLM_API_KEY', 'not-needed')
        self.LLM_MODEL_NAME = os.getenv('LLM_MODEL_NAME', 'default')
        self.LLM_TIMEOUT_SECONDS = os.getenv('LLM_TIMEOUT_SECONDS', '60')
        self.LLM_MAX_CONCURRENCY = os.getenv('LLM_MAX_CONCURRENCY', '1')

        # Search
        self.SEARCH_TIMEOUT_SECONDS = os.getenv('SEARCH_TIMEOUT_SECONDS', '15')
        self.MAX_SEARCH_RESULTS = os.getenv('MAX_SEARCH_RESULTS', str(DEFAULT_MAX_SEARCH_RESULTS))
        self.SIZE_PER_SEARCH_RESULT = os.getenv(
            'SIZE_PER_SEARCH_RESULT', str(DEFAULT_SIZE_PER_SEARCH_RESULT)
        )

        # Operating mode: SERVER_MODE=true exposes the pipeline as a networked service
        self.SERVER_MODE = _env_flag('SERVER_MODE')

    @property
    def mode(self) -> OperatingMode:
        return OperatingMode.SERVER if self.SERVER_MODE else OperatingMode.LOCAL

    def validate(self) -> bool:
        """
        Validate the configuration.

        Returns:
            bool: True if configuration is valid

        Raises:
            ValueError: if a numeric setting is malformed or out of range
        """
        self.to_settings()
        if not self.LLM_BASE_URL:
            raise ValueError("LLM_BASE_URL must not be empty")
        return True

    def to_settings(self) -> PipelineSettings:
        """Freeze the current values into PipelineSettings."""
        try:
            return PipelineSettings(
                mode=self.mode,
                max_search_results=int(self.MAX_SEARCH_RESULTS),
                size_per_search_result=int(self.SIZE_PER_SEARCH_RESULT),
                llm_timeout_s=float(self.LLM_TIMEOUT_SECONDS),
                search_timeout_s=float(self.SEARCH_TIMEOUT_SECONDS),
                llm_max_concurrency=int(self.LLM_MAX_CONCURRENCY),
                model_name=self.LLM_MODEL_NAME,
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid configuration: {e}") from e

    def get_model_info(self) -> str:
        return f"{self.LLM_MODEL_NAME} @ {self.LLM_BASE_URL} ({self.mode.value} mode)"
