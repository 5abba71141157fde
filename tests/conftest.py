"""Shared fixtures: a scripted completion client and in-memory backends."""

from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from logsage.integrations.base import LogBackend
from logsage.models.schemas import BackendConnection, LogEntry, SearchParams
from logsage.utils.llm_client import LLMResponse


def _scripted_llm(*texts: str) -> MagicMock:
    client = MagicMock()
    client.complete = AsyncMock(side_effect=[
        LLMResponse(text=t, input_tokens=10, output_tokens=5) for t in texts
    ])
    return client


class FakeBackend(LogBackend):
    """Returns canned raw documents (or raises ``error``) and records what it was asked."""

    source = "fake"
    timestamp_fields = ("@timestamp",)

    def __init__(self, connection: BackendConnection, docs: list[Any], error: Optional[Exception] = None):
        super().__init__(connection)
        self.docs = docs
        self.error = error
        self.searched_with: list[SearchParams] = []
        self.closed = False

    def compile(self, params: SearchParams) -> dict:
        return params.model_dump()

    async def _fetch(self, compiled: dict, params: SearchParams) -> list[dict]:
        self.searched_with.append(params)
        if self.error is not None:
            raise self.error
        return self.docs

    async def close(self) -> None:
        self.closed = True


class FakeBackendFactory:
    """Drop-in for ``get_backend``: every backend it builds serves ``docs``."""

    def __init__(self):
        self.docs: list[Any] = []
        self.error: Optional[Exception] = None
        self.created: list[FakeBackend] = []

    def __call__(self, source: str, connection: BackendConnection) -> FakeBackend:
        backend = FakeBackend(connection, docs=self.docs, error=self.error)
        self.created.append(backend)
        return backend


@pytest.fixture
def make_llm():
    """Factory for completion clients whose successive calls return the given texts."""
    return _scripted_llm


@pytest.fixture
def fake_backends() -> FakeBackendFactory:
    return FakeBackendFactory()


@pytest.fixture
def connection() -> BackendConnection:
    return BackendConnection(url="http://logs.example:9200", username="elastic", password="secret")


@pytest.fixture
def sample_logs() -> list[LogEntry]:
    return [
        LogEntry(
            timestamp=f"2025-12-26T14:00:{i % 60:02d}Z",
            level="ERROR",
            message=f"ConnectionTimeout after {i}s",
            service="payment-service",
        )
        for i in range(10)
    ]
