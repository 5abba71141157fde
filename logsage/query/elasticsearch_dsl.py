"""Search-DSL compiler for Elasticsearch-style backends."""

from typing import Any

from logsage.models.schemas import SearchParams
from logsage.query.time_range import parse_time_range

# Union of the usual log index families; the compiler does not care which exist.
ES_INDEX_PATTERNS = ("logs-*", "filebeat-*", "logstash-*")

TEXT_FIELDS = ["message", "log", "msg", "*"]
TIMESTAMP_FIELD = "@timestamp"


def compile_search(params: SearchParams) -> dict[str, Any]:
    """Build the search request body for ``params``.

    Clauses are ANDed in a fixed order: text match, time range, then one
    term clause per filter. An empty clause list becomes match_all.
    """
    must: list[dict[str, Any]] = []

    if params.query:
        must.append({
            "query_string": {
                "query": params.query,
                "fields": list(TEXT_FIELDS),
            }
        })

    if params.time_range is not None:
        amount, unit = parse_time_range(params.time_range)
        must.append({
            "range": {
                TIMESTAMP_FIELD: {"gte": f"now-{amount}{unit}"},
            }
        })

    for field, value in params.filters.items():
        must.append({"term": {field: value}})

    if not must:
        must = [{"match_all": {}}]

    return {
        "query": {"bool": {"must": must}},
        "size": params.size,
        "sort": [{TIMESTAMP_FIELD: {"order": "desc"}}],
    }
