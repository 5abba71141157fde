"""
OpenObserve backend: SQL text over the REST search API.

POST {url}/api/{org}/default/_search with {"query": {"sql": ..., "size": ...}}
and HTTP basic auth.
"""

import httpx

from logsage.errors import UpstreamError
from logsage.integrations.base import LogBackend
from logsage.models.schemas import BackendConnection, SearchParams
from logsage.query.openobserve_sql import TIMESTAMP_COLUMN, CompiledSql, compile_sql
from logsage.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ORGANIZATION = "default"


class OpenObserveBackend(LogBackend):
    source = "openobserve"
    timestamp_fields = (TIMESTAMP_COLUMN,)

    def __init__(self, connection: BackendConnection, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(connection)
        self.organization = connection.organization or DEFAULT_ORGANIZATION
        self._client = httpx.AsyncClient(
            auth=httpx.BasicAuth(connection.username or "", connection.password or ""),
            transport=transport,
        )
        logger.info("OpenObserve client initialized", extra={
            "source": self.source,
            "action": "client_init",
            "extra": {"url": self.base_url, "organization": self.organization},
        })

    @property
    def search_url(self) -> str:
        return f"{self.base_url}/api/{self.organization}/default/_search"

    def compile(self, params: SearchParams) -> CompiledSql:
        return compile_sql(params)

    async def _fetch(self, compiled: CompiledSql, params: SearchParams) -> list[dict]:
        body = {"query": {"sql": compiled.render(), "size": params.size}}
        logger.debug("OpenObserve query", extra={
            "source": self.source,
            "action": "query",
            "extra": {"url": self.search_url, "sql": compiled.sql},
        })
        try:
            resp = await self._client.post(self.search_url, json=body)
        except httpx.HTTPError as e:
            logger.error("OpenObserve unreachable", extra={
                "source": self.source, "action": "search_error", "extra": str(e),
            })
            raise UpstreamError(self.source, f"Cannot connect to OpenObserve: {e}") from e

        if not resp.is_success:
            logger.error("OpenObserve search failed", extra={
                "source": self.source, "action": "search_error", "extra": {"status": resp.status_code},
            })
            raise UpstreamError(self.source, "search failed", status=resp.status_code, body=resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(self.source, "Invalid response format") from e
        hits = data.get("hits") if isinstance(data, dict) else None
        if not isinstance(hits, list):
            raise UpstreamError(self.source, "Invalid response format")
        return hits

    async def close(self) -> None:
        await self._client.aclose()
