from pydantic import BaseModel, Field
from typing import Any, Optional


class SearchParams(BaseModel):
    """Structured search intent handed to a backend compiler."""
    query: str = ""
    time_range: Optional[str] = None  # relative token ("1h", "7d"); None = unbounded
    filters: dict[str, str] = Field(default_factory=dict)
    size: int = Field(default=100, gt=0)


class LogEntry(BaseModel):
    """Canonical log record every backend hit is coerced into.

    Whatever else the source document carried is kept as model extras: flat
    beside the canonical keys on the wire, and restored unchanged when the
    wire shape is validated again. A source key that shares a canonical
    name is the canonical value, never an extra.
    """
    model_config = {"extra": "allow"}

    timestamp: str
    level: str = "INFO"
    message: str = ""
    service: Optional[str] = None
    trace_id: Optional[str] = None

    @property
    def extra_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class DebugContext(BaseModel):
    """Advisory hints merged into debug query synthesis. All optional."""
    service: Optional[str] = None
    time_range: Optional[str] = None
    environment: Optional[str] = None
    user_id: Optional[str] = None
    request_id: Optional[str] = None


class DebugAnalysis(BaseModel):
    analysis: str = Field(min_length=1)
    root_cause: Optional[str] = None
    recommendations: list[str] = Field(default_factory=list)


class BackendConnection(BaseModel):
    """Caller-supplied connection details for one backend request."""
    url: str
    username: Optional[str] = None
    password: Optional[str] = None
    organization: Optional[str] = None


class QueryResult(BaseModel):
    query: str
    params: SearchParams
    results: list[LogEntry] = Field(default_factory=list)
    total: int = 0
    summary: str = ""


class DebugReport(BaseModel):
    issue: str
    analysis: str
    root_cause: Optional[str] = None
    recommendations: list[str] = Field(default_factory=list)
    relevant_logs: list[LogEntry] = Field(default_factory=list)
