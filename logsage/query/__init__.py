"""Pure compilers from SearchParams to backend-native queries."""

from .elasticsearch_dsl import ES_INDEX_PATTERNS, compile_search
from .openobserve_sql import CompiledSql, compile_sql
from .time_range import parse_time_range, resolve_time_range, time_range_to_ms

__all__ = [
    "ES_INDEX_PATTERNS",
    "CompiledSql",
    "compile_search",
    "compile_sql",
    "parse_time_range",
    "resolve_time_range",
    "time_range_to_ms",
]
