"""
Query intent parser: free text (plus optional debug context) → SearchParams.

The completion is asked for {"query", "time_range", "filters"}. Whatever comes
back is treated as untrusted: a reply that is not a JSON object yields a
deterministic fallback built from the caller's own text. Only a transport
failure (CompletionError) escapes.
"""

from typing import Optional

from logsage.agents.completion_parsing import (
    CompletionOutcome, Fallback, Structured, optional_str, parse_json_object, string_map,
)
from logsage.models.schemas import DebugContext, SearchParams
from logsage.utils.llm_client import AnthropicClient
from logsage.utils.logger import get_logger

logger = get_logger(__name__)

QUERY_SIZE = 100
DEBUG_QUERY_SIZE = 200
DEFAULT_TIME_RANGE = "1h"

PARSE_QUERY_PROMPT = """You are a log query parser. Convert natural language queries into structured search parameters.
Extract:
1. The main search query (keywords to search in logs)
2. Time range if mentioned (format: 5m, 1h, 24h, 7d, etc.)
3. Filters like service name, log level, etc.

Respond with ONLY a JSON object, no markdown, no explanation:
{
  "query": "extracted keywords",
  "time_range": "1h" or null,
  "filters": {"field": "value"}
}

Examples:
- "Show errors in payment service last hour" -> {"query": "error", "time_range": "1h", "filters": {"service": "payment", "level": "ERROR"}}
- "Database timeouts" -> {"query": "database timeout", "time_range": null, "filters": {}}
- "Recent logs" -> {"query": "", "time_range": "1h", "filters": {}}
"""

DEBUG_QUERY_PROMPT = """You are a debugging expert. Based on the issue description and context, create an effective search query to find relevant logs.

Respond with ONLY a JSON object, no markdown, no explanation:
{
  "query": "search keywords",
  "time_range": "suggested time range (5m, 1h, 24h, 7d)",
  "filters": {"field": "value"}
}
"""


def summarize_context(context: DebugContext) -> str:
    def show(value: Optional[str]) -> str:
        return value or "N/A"

    return (
        f"Service: {show(context.service)}, Time: {show(context.time_range)}, "
        f"Env: {show(context.environment)}, User: {show(context.user_id)}, "
        f"Request: {show(context.request_id)}"
    )


def _query_or(data: dict, default: str) -> str:
    # An explicit empty string is a valid "match everything" answer.
    value = data.get("query")
    return value.strip() if isinstance(value, str) else default


class QueryIntentParser:
    """Turns operator text into SearchParams via the completion service."""

    def __init__(self, llm_client: AnthropicClient):
        self.llm_client = llm_client

    async def parse_query(self, text: str) -> SearchParams:
        return (await self.interpret_query(text)).value

    async def interpret_query(self, text: str) -> CompletionOutcome[SearchParams]:
        response = await self.llm_client.complete(
            system=PARSE_QUERY_PROMPT,
            prompt=text,
            temperature=0.3,
        )
        data = parse_json_object(response.text)
        if data is None:
            logger.warning("Unparseable query completion, using fallback", extra={
                "action": "parse_query_fallback",
                "extra": {"response": response.text[:200]},
            })
            return Fallback(
                SearchParams(query=text, time_range=DEFAULT_TIME_RANGE, filters={}, size=QUERY_SIZE),
                reason="completion was not a JSON object",
            )

        params = SearchParams(
            query=_query_or(data, text),
            time_range=optional_str(data.get("time_range")),
            filters=string_map(data.get("filters")),
            size=QUERY_SIZE,
        )
        logger.info("Parsed query intent", extra={"action": "parse_query", "extra": params.model_dump()})
        return Structured(params)

    async def create_debug_query(self, issue: str, context: Optional[DebugContext] = None) -> SearchParams:
        return (await self.interpret_debug_query(issue, context)).value

    async def interpret_debug_query(
        self, issue: str, context: Optional[DebugContext] = None,
    ) -> CompletionOutcome[SearchParams]:
        context = context or DebugContext()
        prompt = (
            f"Issue: {issue}\n"
            f"Context: {summarize_context(context)}\n\n"
            "Create an optimal search query."
        )
        response = await self.llm_client.complete(
            system=DEBUG_QUERY_PROMPT,
            prompt=prompt,
            temperature=0.3,
        )
        default_time_range = optional_str(context.time_range) or DEFAULT_TIME_RANGE
        data = parse_json_object(response.text)

        if data is None:
            logger.warning("Unparseable debug query completion, using fallback", extra={
                "action": "debug_query_fallback",
                "extra": {"response": response.text[:200]},
            })
            outcome: CompletionOutcome[SearchParams] = Fallback(
                SearchParams(query=issue, time_range=default_time_range, filters={}, size=DEBUG_QUERY_SIZE),
                reason="completion was not a JSON object",
            )
        else:
            outcome = Structured(SearchParams(
                query=_query_or(data, issue),
                time_range=optional_str(data.get("time_range")) or default_time_range,
                filters=string_map(data.get("filters")),
                size=DEBUG_QUERY_SIZE,
            ))

        # Context wins over whatever the model proposed for the same key.
        if context.service:
            outcome.value.filters["service"] = context.service

        logger.info("Built debug query", extra={
            "action": "create_debug_query",
            "extra": {"fallback": isinstance(outcome, Fallback), **outcome.value.model_dump()},
        })
        return outcome
