from .schemas import (
    BackendConnection,
    DebugAnalysis,
    DebugContext,
    DebugReport,
    LogEntry,
    QueryResult,
    SearchParams,
)

__all__ = [
    "BackendConnection",
    "DebugAnalysis",
    "DebugContext",
    "DebugReport",
    "LogEntry",
    "QueryResult",
    "SearchParams",
]
