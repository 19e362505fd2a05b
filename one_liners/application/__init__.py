"""Application services."""

from .conversation import ConversationClient
from .extraction import SummaryExtractor, find_answer, parse_answer, summary_sentences
from .orchestrator import (
    EntryOrchestrator,
    build_orchestrator,
    configure_orchestrator,
    get_orchestrator,
)
from .polling import RunPoller

__all__ = [
    "ConversationClient",
    "EntryOrchestrator",
    "RunPoller",
    "SummaryExtractor",
    "build_orchestrator",
    "configure_orchestrator",
    "find_answer",
    "get_orchestrator",
    "parse_answer",
    "summary_sentences",
]
