"""
Analysis synthesis over normalized logs.

``analyze_logs`` returns free text. ``debug_with_logs`` asks for
{"analysis", "root_cause", "recommendations"} and falls back to using the
raw completion as the analysis when the reply breaks that contract.
"""

import json
from typing import Optional

from logsage.agents.completion_parsing import (
    CompletionOutcome, Fallback, Structured, optional_str, parse_json_object, string_list,
)
from logsage.models.schemas import DebugAnalysis, DebugContext, LogEntry
from logsage.utils.llm_client import AnthropicClient
from logsage.utils.logger import get_logger

logger = get_logger(__name__)

# Context-window budget: logs beyond this are counted, not sent.
MAX_PROMPT_LOGS = 50
NO_ANALYSIS_TEXT = "Unable to analyze logs"

ANALYZE_PROMPT = (
    "You are a log analysis expert. Analyze the provided logs and answer the user's "
    "question with detailed insights, patterns, and actionable recommendations."
)

DEBUG_PROMPT = """You are an expert SRE and debugging assistant. Analyze the issue, logs, and context to provide:
1. A detailed analysis of what's happening
2. The root cause (if identifiable)
3. Step-by-step recommendations to fix the issue

Respond with ONLY a JSON object, no markdown, no explanation:
{
  "analysis": "detailed analysis",
  "root_cause": "identified root cause or null",
  "recommendations": ["step 1", "step 2", ...]
}
"""


def _dump_logs(logs: list[LogEntry]) -> str:
    return json.dumps([log.model_dump() for log in logs], indent=2, default=str)


def summarize_logs(logs: list[LogEntry]) -> str:
    """Serialize logs for a prompt, keeping only the first MAX_PROMPT_LOGS.

    When truncated, the text starts with the true total so the model knows
    it is looking at a sample.
    """
    if len(logs) > MAX_PROMPT_LOGS:
        return (
            f"Found {len(logs)} logs. Here are the most recent:\n"
            f"{_dump_logs(logs[:MAX_PROMPT_LOGS])}"
        )
    return _dump_logs(logs)


class DebugAnalyst:
    """Synthesizes narratives and structured debug analyses from logs."""

    def __init__(self, llm_client: AnthropicClient):
        self.llm_client = llm_client

    async def analyze_logs(self, logs: list[LogEntry], question: str) -> str:
        logger.info("Analyzing logs", extra={"action": "analyze_logs", "extra": {"log_count": len(logs)}})
        prompt = (
            f"Question: {question}\n\n"
            f"Logs:\n{_dump_logs(logs)}\n\n"
            "Provide a detailed analysis."
        )
        response = await self.llm_client.complete(
            system=ANALYZE_PROMPT,
            prompt=prompt,
            temperature=0.5,
            max_tokens=1500,
        )
        return response.text if response.text.strip() else NO_ANALYSIS_TEXT

    async def debug_with_logs(
        self, issue: str, logs: list[LogEntry], context: Optional[DebugContext] = None,
    ) -> DebugAnalysis:
        return (await self.interpret_debug_analysis(issue, logs, context)).value

    async def interpret_debug_analysis(
        self, issue: str, logs: list[LogEntry], context: Optional[DebugContext] = None,
    ) -> CompletionOutcome[DebugAnalysis]:
        context = context or DebugContext()
        logger.info("Performing debug analysis", extra={
            "action": "debug_with_logs",
            "extra": {"log_count": len(logs), "truncated": len(logs) > MAX_PROMPT_LOGS},
        })
        prompt = (
            f"Issue: {issue}\n\n"
            f"Context:\n{context.model_dump_json(indent=2)}\n\n"
            f"Logs:\n{summarize_logs(logs)}\n\n"
            "Provide debugging analysis."
        )
        response = await self.llm_client.complete(
            system=DEBUG_PROMPT,
            prompt=prompt,
            temperature=0.4,
            max_tokens=2000,
        )

        data = parse_json_object(response.text)
        analysis = optional_str(data.get("analysis")) if data is not None else None
        if analysis is None:
            logger.warning("Malformed debug analysis, using raw completion", extra={
                "action": "debug_analysis_fallback",
                "extra": {"response": response.text[:200]},
            })
            return Fallback(
                DebugAnalysis(analysis=response.text if response.text.strip() else NO_ANALYSIS_TEXT),
                reason="completion did not match the analysis contract",
            )

        return Structured(DebugAnalysis(
            analysis=analysis,
            root_cause=optional_str(data.get("root_cause")),
            recommendations=string_list(data.get("recommendations")),
        ))
