"""Tests for the Elasticsearch and OpenObserve backends and the source registry."""

import json
import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock, patch

from elasticsearch import ApiError, ConnectionError as ESConnectionError

from logsage.errors import ConfigurationError, UnknownSourceError, UpstreamError
from logsage.integrations.elasticsearch_backend import ElasticsearchBackend
from logsage.integrations.openobserve_backend import OpenObserveBackend
from logsage.integrations.registry import BACKENDS, get_backend, get_backend_class
from logsage.models.schemas import BackendConnection, SearchParams


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _mock_es(search_result=None, side_effect=None) -> MagicMock:
    instance = MagicMock()
    instance.search = AsyncMock(return_value=search_result, side_effect=side_effect)
    instance.close = AsyncMock()
    return instance


def _oo_backend(handler, **conn) -> OpenObserveBackend:
    connection = BackendConnection(
        url=conn.get("url", "http://o2.example:5080/"),
        username=conn.get("username", "root@example.com"),
        password=conn.get("password", "pw"),
        organization=conn.get("organization"),
    )
    return OpenObserveBackend(connection, transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:

    def test_known_sources(self):
        assert set(BACKENDS) == {"elasticsearch", "openobserve"}
        assert get_backend_class("elasticsearch") is ElasticsearchBackend
        assert get_backend_class("openobserve") is OpenObserveBackend

    def test_unknown_source_is_a_caller_error(self, connection):
        with pytest.raises(UnknownSourceError, match="Unknown source: splunk"):
            get_backend("splunk", connection)

    def test_get_backend_builds_fresh_instances(self):
        conn = BackendConnection(url="http://o2:5080")
        first = get_backend("openobserve", conn)
        second = get_backend("openobserve", conn)
        assert isinstance(first, OpenObserveBackend)
        assert first is not second

    @pytest.mark.parametrize("url", ["", "not a url", "ftp://logs:21", "http://"])
    def test_invalid_url_is_a_configuration_error(self, url):
        with pytest.raises(ConfigurationError):
            get_backend("openobserve", BackendConnection(url=url))


# ---------------------------------------------------------------------------
# Elasticsearch
# ---------------------------------------------------------------------------

class TestElasticsearchBackend:

    def test_basic_auth_only_with_both_credentials(self):
        with patch("logsage.integrations.elasticsearch_backend.AsyncElasticsearch") as MockES:
            ElasticsearchBackend(BackendConnection(url="http://es:9200", username="u", password="p"))
            assert MockES.call_args.kwargs["basic_auth"] == ("u", "p")

            ElasticsearchBackend(BackendConnection(url="http://es:9200", username="u"))
            assert "basic_auth" not in MockES.call_args.kwargs

    @pytest.mark.asyncio
    async def test_search_sends_compiled_body_and_normalizes_hits(self, connection):
        es = _mock_es({"hits": {"hits": [
            {"_index": "logs-app", "_source": {"@timestamp": "2025-12-26T14:00:33Z", "message": "boom", "level": "ERROR"}},
            {"_index": "logs-app", "_source": {"@timestamp": "2025-12-26T14:00:34Z", "log": "raw line"}},
            {"_index": "logs-app", "_source": {"message": "no timestamp at all"}},
        ]}})
        with patch("logsage.integrations.elasticsearch_backend.AsyncElasticsearch", return_value=es):
            async with ElasticsearchBackend(connection) as backend:
                entries = await backend.search(SearchParams(
                    query="error", time_range="1h", filters={"service": "payment"}, size=100,
                ))

        call = es.search.call_args.kwargs
        assert call["index"] == "logs-*,filebeat-*,logstash-*"
        assert len(call["query"]["bool"]["must"]) == 3
        assert call["size"] == 100
        assert call["sort"] == [{"@timestamp": {"order": "desc"}}]

        assert [e.message for e in entries] == ["boom", "raw line"]
        assert entries[0].level == "ERROR"
        assert entries[1].level == "INFO"
        assert entries[0].timestamp == "2025-12-26T14:00:33Z"
        es.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_api_error_carries_status_and_body(self, connection):
        err = ApiError("index_not_found_exception", meta=MagicMock(status=404), body={"error": "no such index"})
        es = _mock_es(side_effect=err)
        with patch("logsage.integrations.elasticsearch_backend.AsyncElasticsearch", return_value=es):
            backend = ElasticsearchBackend(connection)
            with pytest.raises(UpstreamError) as exc_info:
                await backend.search(SearchParams())
        assert exc_info.value.status == 404
        assert "no such index" in exc_info.value.body

    @pytest.mark.asyncio
    async def test_unreachable_cluster_raises_upstream_error(self, connection):
        es = _mock_es(side_effect=ESConnectionError("connection refused"))
        with patch("logsage.integrations.elasticsearch_backend.AsyncElasticsearch", return_value=es):
            backend = ElasticsearchBackend(connection)
            with pytest.raises(UpstreamError) as exc_info:
                await backend.search(SearchParams())
        assert exc_info.value.status is None
        assert es.search.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_hits_is_invalid_response(self, connection):
        es = _mock_es({"took": 3})
        with patch("logsage.integrations.elasticsearch_backend.AsyncElasticsearch", return_value=es):
            with pytest.raises(UpstreamError, match="Invalid response format"):
                await ElasticsearchBackend(connection).search(SearchParams())


# ---------------------------------------------------------------------------
# OpenObserve
# ---------------------------------------------------------------------------

class TestOpenObserveBackend:

    @pytest.mark.asyncio
    async def test_search_posts_rendered_sql_with_basic_auth(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization", "")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"hits": [
                {"_timestamp": 1_700_000_000_000_000, "log": "disk full", "service": "storage"},
                {"_timestamp": {"bad": True}, "log": "dropped"},
            ]})

        async with _oo_backend(handler, organization="acme") as backend:
            entries = await backend.search(SearchParams(query="disk", filters={"service": "storage"}, size=25))

        assert seen["url"] == "http://o2.example:5080/api/acme/default/_search"
        assert seen["auth"].startswith("Basic ")
        sql = seen["body"]["query"]["sql"]
        assert sql.startswith("SELECT * FROM default WHERE (message LIKE '%disk%' OR log LIKE '%disk%')")
        assert "service = 'storage'" in sql
        assert sql.endswith("ORDER BY _timestamp DESC LIMIT 25")
        assert seen["body"]["query"]["size"] == 25

        assert len(entries) == 1
        assert entries[0].message == "disk full"
        assert entries[0].service == "storage"
        assert entries[0].timestamp == "2023-11-14T22:13:20+00:00"

    @pytest.mark.asyncio
    async def test_organization_defaults(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            return httpx.Response(200, json={"hits": []})

        async with _oo_backend(handler) as backend:
            assert await backend.search(SearchParams()) == []
        assert seen["path"] == "/api/default/default/_search"

    @pytest.mark.asyncio
    async def test_non_success_status_is_surfaced_verbatim(self):
        def handler(request):
            return httpx.Response(401, text='{"code":401,"message":"Unauthorized Access"}')

        async with _oo_backend(handler) as backend:
            with pytest.raises(UpstreamError) as exc_info:
                await backend.search(SearchParams())
        assert exc_info.value.status == 401
        assert exc_info.value.body == '{"code":401,"message":"Unauthorized Access"}'
        assert "openobserve API error 401" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_connection_failure_is_upstream_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _oo_backend(handler) as backend:
            with pytest.raises(UpstreamError) as exc_info:
                await backend.search(SearchParams())
        assert exc_info.value.status is None

    @pytest.mark.asyncio
    async def test_invalid_response_shape(self):
        def handler(request):
            return httpx.Response(200, json={"took": 1})

        async with _oo_backend(handler) as backend:
            with pytest.raises(UpstreamError, match="Invalid response format"):
                await backend.search(SearchParams())
