"""
HTTP routes. Thin wiring only: validation, error mapping, response shaping.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from logsage.errors import CompletionError, ConfigurationError, UnknownSourceError, UpstreamError
from logsage.models.schemas import BackendConnection
from logsage.orchestrator import LogSearchOrchestrator
from logsage.utils.logger import get_logger

from .models import (
    AnalyzeRequest,
    AnalyzeResponse,
    DebugRequest,
    DebugResponse,
    HealthResponse,
    QueryRequest,
    QueryResponse,
)

logger = get_logger(__name__)

router = APIRouter()


def get_orchestrator(request: Request) -> LogSearchOrchestrator:
    return request.app.state.orchestrator


def _to_http_error(e: Exception) -> HTTPException:
    if isinstance(e, (UnknownSourceError, ConfigurationError)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, UpstreamError):
        return HTTPException(status_code=502, detail={
            "error": str(e),
            "source": e.source,
            "upstream_status": e.status,
            "upstream_body": e.body,
        })
    return HTTPException(status_code=502, detail=str(e))


@router.get("/")
async def root():
    return {
        "name": "logsage",
        "endpoints": ["GET /api/health", "POST /api/query", "POST /api/analyze", "POST /api/debug"],
    }


@router.get("/api/health", response_model=HealthResponse)
async def health_check(request: Request):
    return HealthResponse(status="healthy", ai_enabled=request.app.state.settings.ai_enabled)


@router.post("/api/query", response_model=QueryResponse)
async def query_logs(body: QueryRequest, orchestrator: LogSearchOrchestrator = Depends(get_orchestrator)):
    try:
        result = await orchestrator.query_logs(body.query, body.source, body.config)
    except (UnknownSourceError, ConfigurationError, UpstreamError, CompletionError) as e:
        logger.warning("Query failed", extra={"source": body.source, "action": "query_logs", "extra": str(e)})
        raise _to_http_error(e)

    return QueryResponse(
        query=result.query,
        results=result.results,
        total=result.total,
        summary=result.summary,
    )


@router.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze_logs(body: AnalyzeRequest, orchestrator: LogSearchOrchestrator = Depends(get_orchestrator)):
    try:
        analysis = await orchestrator.analyze_logs(body.logs, body.question)
    except CompletionError as e:
        raise _to_http_error(e)
    return AnalyzeResponse(analysis=analysis, log_count=len(body.logs))


@router.post("/api/debug", response_model=DebugResponse)
async def debug_issue(body: DebugRequest, orchestrator: LogSearchOrchestrator = Depends(get_orchestrator)):
    connection = BackendConnection(**body.config.model_dump(exclude={"source"}))
    try:
        report = await orchestrator.debug(
            body.issue_description, body.config.source, connection, body.context,
        )
    except (UnknownSourceError, ConfigurationError, UpstreamError, CompletionError) as e:
        logger.warning("Debug failed", extra={"source": body.config.source, "action": "debug", "extra": str(e)})
        raise _to_http_error(e)

    return DebugResponse(
        issue=report.issue,
        analysis=report.analysis,
        root_cause=report.root_cause,
        recommendations=report.recommendations,
        relevant_logs=report.relevant_logs,
    )
