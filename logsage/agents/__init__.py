"""Completion-backed agents: intent parsing and analysis synthesis."""

from .debug_analyst import DebugAnalyst
from .query_parser import QueryIntentParser

__all__ = ["DebugAnalyst", "QueryIntentParser"]
