"""
API Request/Response Models
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from logsage.models.schemas import BackendConnection, DebugContext, LogEntry


class HealthResponse(BaseModel):
    status: str
    ai_enabled: bool


class QueryRequest(BaseModel):
    query: str = Field(..., description="Free-text search intent")
    source: str = Field(..., description="Backend source tag, e.g. elasticsearch or openobserve")
    config: BackendConnection


class QueryResponse(BaseModel):
    query: str
    results: List[LogEntry]
    total: int
    summary: Optional[str] = None


class AnalyzeRequest(BaseModel):
    logs: List[LogEntry]
    question: str


class AnalyzeResponse(BaseModel):
    analysis: str
    log_count: int


class DebugConfig(BackendConnection):
    source: str = Field(..., description="Backend source tag")


class DebugRequest(BaseModel):
    issue_description: str = Field(..., min_length=1)
    context: DebugContext = Field(default_factory=DebugContext)
    config: DebugConfig


class DebugResponse(BaseModel):
    issue: str
    analysis: str
    root_cause: Optional[str] = None
    recommendations: List[str]
    relevant_logs: List[LogEntry]
