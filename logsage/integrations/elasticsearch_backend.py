"""Elasticsearch backend: search-DSL payloads over the log index patterns."""

from typing import Any

from elasticsearch import ApiError, AsyncElasticsearch, TransportError

from logsage.errors import ConfigurationError, UpstreamError
from logsage.integrations.base import LogBackend
from logsage.models.schemas import BackendConnection, SearchParams
from logsage.query.elasticsearch_dsl import ES_INDEX_PATTERNS, compile_search
from logsage.utils.logger import get_logger

logger = get_logger(__name__)


class ElasticsearchBackend(LogBackend):
    source = "elasticsearch"
    timestamp_fields = ("@timestamp",)

    def __init__(self, connection: BackendConnection):
        super().__init__(connection)
        kwargs: dict[str, Any] = {}
        if connection.username and connection.password:
            kwargs["basic_auth"] = (connection.username, connection.password)
        try:
            self._client = AsyncElasticsearch(self.base_url, **kwargs)
        except ValueError as e:
            raise ConfigurationError(f"Invalid Elasticsearch configuration: {e}") from e
        logger.info("Elasticsearch client initialized", extra={
            "source": self.source,
            "action": "client_init",
            "extra": {"url": self.base_url, "authenticated": "basic_auth" in kwargs},
        })

    def compile(self, params: SearchParams) -> dict[str, Any]:
        return compile_search(params)

    async def _fetch(self, compiled: dict[str, Any], params: SearchParams) -> list[dict]:
        logger.debug("Elasticsearch query", extra={"source": self.source, "action": "query", "extra": compiled})
        try:
            resp = await self._client.search(index=",".join(ES_INDEX_PATTERNS), **compiled)
        except ApiError as e:
            logger.error("Elasticsearch search failed", extra={
                "source": self.source, "action": "search_error", "extra": {"status": e.meta.status},
            })
            raise UpstreamError(self.source, e.message, status=e.meta.status, body=str(e.body)) from e
        except TransportError as e:
            logger.error("Elasticsearch unreachable", extra={
                "source": self.source, "action": "search_error", "extra": str(e),
            })
            raise UpstreamError(self.source, f"Cannot connect to Elasticsearch: {e}") from e

        body = getattr(resp, "body", resp)
        hits = (body.get("hits") or {}).get("hits") if isinstance(body, dict) else None
        if not isinstance(hits, list):
            raise UpstreamError(self.source, "Invalid response format")
        return [hit.get("_source") for hit in hits if isinstance(hit, dict)]

    async def close(self) -> None:
        await self._client.close()
