"""
Request pipelines: text → SearchParams → one backend → LogEntry list,
and on the debug path → DebugAnalysis.

Stages run strictly in sequence. The backend is resolved from its source tag
before any completion call, so an unknown tag costs nothing.
"""

from typing import Callable, Optional

from logsage.agents.debug_analyst import DebugAnalyst
from logsage.agents.query_parser import QueryIntentParser
from logsage.integrations.base import LogBackend
from logsage.integrations.registry import get_backend
from logsage.models.schemas import (
    BackendConnection, DebugContext, DebugReport, LogEntry, QueryResult, SearchParams,
)
from logsage.utils.llm_client import AnthropicClient
from logsage.utils.logger import get_logger

logger = get_logger(__name__)

BackendFactory = Callable[[str, BackendConnection], LogBackend]


def summarize_results(logs: list[LogEntry]) -> str:
    if logs:
        return f"Found {len(logs)} logs"
    return "No logs found matching your query"


class LogSearchOrchestrator:
    """Chains intent parsing, backend dispatch and analysis synthesis."""

    def __init__(self, llm_client: AnthropicClient, backend_factory: BackendFactory = get_backend):
        self.query_parser = QueryIntentParser(llm_client)
        self.analyst = DebugAnalyst(llm_client)
        self._backend_factory = backend_factory

    async def search(self, source: str, connection: BackendConnection, params: SearchParams) -> list[LogEntry]:
        async with self._backend_factory(source, connection) as backend:
            return await backend.search(params)

    async def query_logs(self, text: str, source: str, connection: BackendConnection) -> QueryResult:
        logger.info("Query request", extra={"source": source, "action": "query_logs", "extra": {"query": text}})
        async with self._backend_factory(source, connection) as backend:
            params = await self.query_parser.parse_query(text)
            logs = await backend.search(params)
        return QueryResult(
            query=text,
            params=params,
            results=logs,
            total=len(logs),
            summary=summarize_results(logs),
        )

    async def analyze_logs(self, logs: list[LogEntry], question: str) -> str:
        return await self.analyst.analyze_logs(logs, question)

    async def debug(
        self,
        issue: str,
        source: str,
        connection: BackendConnection,
        context: Optional[DebugContext] = None,
    ) -> DebugReport:
        context = context or DebugContext()
        logger.info("Debug request", extra={"source": source, "action": "debug", "extra": {"issue": issue}})
        async with self._backend_factory(source, connection) as backend:
            params = await self.query_parser.create_debug_query(issue, context)
            logs = await backend.search(params)
        analysis = await self.analyst.debug_with_logs(issue, logs, context)
        logger.info("Debug analysis complete", extra={
            "source": source,
            "action": "debug",
            "extra": {"log_count": len(logs), "recommendations": len(analysis.recommendations)},
        })
        return DebugReport(
            issue=issue,
            analysis=analysis.analysis,
            root_cause=analysis.root_cause,
            recommendations=analysis.recommendations,
            relevant_logs=logs,
        )
