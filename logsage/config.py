"""
Process-level settings resolved from the environment.

Backend connection details are not process configuration: they arrive with
each request as a BackendConnection.
"""

import os
from dataclasses import dataclass

from logsage.utils.logger import get_logger

logger = get_logger("config")

DEFAULT_LLM_MODEL = "claude-3-5-haiku-20241022"
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://localhost:3000")


@dataclass(frozen=True)
class Settings:
    """Immutable settings snapshot. Credentials live only in memory."""
    anthropic_api_key: str = ""
    llm_model: str = DEFAULT_LLM_MODEL
    log_level: str = "INFO"
    cors_origins: tuple = DEFAULT_CORS_ORIGINS

    @property
    def ai_enabled(self) -> bool:
        return bool(self.anthropic_api_key)


def load_settings() -> Settings:
    """Build Settings from environment variables, falling back to defaults."""
    origins = os.getenv("CORS_ORIGINS", "")
    settings = Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        llm_model=os.getenv("LLM_MODEL") or DEFAULT_LLM_MODEL,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or DEFAULT_CORS_ORIGINS,
    )
    if not settings.ai_enabled:
        logger.warning("ANTHROPIC_API_KEY not set, completion calls will fail", extra={"action": "config_load"})
    logger.info("Settings loaded", extra={
        "action": "config_load",
        "extra": {"llm_model": settings.llm_model, "ai_enabled": settings.ai_enabled},
    })
    return settings
