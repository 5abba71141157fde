"""
FastAPI Main Application
Entry point for the API server
"""

from dotenv import load_dotenv
load_dotenv()

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from logsage.config import Settings, load_settings
from logsage.orchestrator import LogSearchOrchestrator
from logsage.utils.llm_client import AnthropicClient
from logsage.utils.logger import configure_logging, get_logger

from .routes import router

logger = get_logger("main")


def create_app(settings: Optional[Settings] = None, llm_client: Optional[AnthropicClient] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="logsage API",
        description="Natural-language log search and debugging over Elasticsearch and OpenObserve",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # One completion client for the whole process; it holds no per-call state.
    llm_client = llm_client or AnthropicClient(
        agent_name="logsage", model=settings.llm_model, api_key=settings.anthropic_api_key or None,
    )
    app.state.settings = settings
    app.state.orchestrator = LogSearchOrchestrator(llm_client)

    app.include_router(router)
    return app


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting logsage API", extra={"action": "startup", "extra": {"port": 3001}})
    uvicorn.run(
        "logsage.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=3001,
        log_level="info",
    )
