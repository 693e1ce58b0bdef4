"""FastAPI dependencies for authentication and orchestrator access."""

import os
import threading

from fastapi import Header, HTTPException, Request, status

from config.config import Config, PipelineSettings
from server.utils import redact_sensitive_headers
from utils.logger import get_logger

logger = get_logger(__name__)

_singleton_lock = threading.Lock()


async def get_api_key(request: Request, x_api_key: str | None = Header(None)):
    """
    Validate the X-API-Key header when API_KEYS is configured.

    A local instance usually runs without API_KEYS and is left open.
    """
    valid_keys_str = os.getenv("API_KEYS", "")
    if not valid_keys_str.strip():
        return None

    request_id = getattr(request.state, "request_id", "unknown")
    valid_keys = [k.strip() for k in valid_keys_str.split(",") if k.strip()]

    if not x_api_key or x_api_key not in valid_keys:
        logger.warning(
            "API authentication failed",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "headers": redact_sensitive_headers(dict(request.headers)),
                }
            },
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API key"
        )

    return x_api_key


def get_config() -> Config:
    """Process configuration (singleton)."""
    if not hasattr(get_config, "_instance"):
        config = Config()
        config.validate()
        get_config._instance = config
    return get_config._instance


def get_settings() -> PipelineSettings:
    """Immutable pipeline settings derived once from the configuration."""
    if not hasattr(get_settings, "_instance"):
        get_settings._instance = get_config().to_settings()
    return get_settings._instance


def get_orchestrator():
    """Dependency to get orchestrator instance (singleton, built at startup)."""
    from api.openai_client import OpenAICompatibleClient
    from orchestrator.core import SearchOrchestrator

    if not hasattr(get_orchestrator, "_instance"):
        # One orchestrator per process: it owns the inference semaphore
        with _singleton_lock:
            if not hasattr(get_orchestrator, "_instance"):
                config = get_config()
                settings = get_settings()
                client = OpenAICompatibleClient(
                    base_url=config.LLM_BASE_URL,
                    api_key=config.LLM_API_KEY,
                    model_name=settings.model_name,
                    timeout_s=settings.llm_timeout_s,
                )
                get_orchestrator._instance = SearchOrchestrator.from_settings(settings, client)
                logger.info(f"Search orchestrator ready: {config.get_model_info()}")
    return get_orchestrator._instance


def reset_singletons() -> None:
    """Drop cached singletons (tests, reconfiguration)."""
    for dep in (get_config, get_settings, get_orchestrator):
        if hasattr(dep, "_instance"):
            delattr(dep, "_instance")
