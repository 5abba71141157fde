"""Abstract LogBackend: one implementation per query dialect."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import urlparse

from logsage.errors import ConfigurationError
from logsage.integrations.normalizer import normalize_documents
from logsage.models.schemas import BackendConnection, LogEntry, SearchParams
from logsage.utils.logger import get_logger

logger = get_logger(__name__)


def validate_base_url(url: str) -> str:
    """Return ``url`` without a trailing slash, or raise ConfigurationError."""
    parsed = urlparse((url or "").strip())
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ConfigurationError(f"Invalid backend URL: {url!r}")
    return url.strip().rstrip("/")


class LogBackend(ABC):
    """Compiles SearchParams for one dialect, runs them, normalizes the hits.

    Instances are built per request from caller-supplied connection details
    and closed when the request is done. Nothing is pooled or retried.
    """

    source: str = ""
    # Backend-specific names aliased into the canonical ``timestamp``.
    timestamp_fields: tuple[str, ...] = ()

    def __init__(self, connection: BackendConnection):
        self.connection = connection
        self.base_url = validate_base_url(connection.url)

    @abstractmethod
    def compile(self, params: SearchParams) -> Any:
        """Backend-native query for ``params``. Pure."""
        ...

    @abstractmethod
    async def _fetch(self, compiled: Any, params: SearchParams) -> list[dict]:
        """Send the compiled query; return the raw hit documents."""
        ...

    async def search(self, params: SearchParams) -> list[LogEntry]:
        compiled = self.compile(params)
        start = time.monotonic()
        raw_docs = await self._fetch(compiled, params)
        entries = normalize_documents(raw_docs, self.timestamp_fields, source=self.source)
        logger.info("Search complete", extra={
            "source": self.source,
            "action": "search",
            "duration_ms": round((time.monotonic() - start) * 1000),
            "extra": {"hits": len(raw_docs), "entries": len(entries), "size": params.size},
        })
        return entries

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "LogBackend":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
