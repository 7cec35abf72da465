"""
Generative log summarization (the open-ended "ai" standard).
"""

from .providers import BaseLLMProvider, GeminiProvider, GroqProvider, get_default_provider
from .schemas import LogSummary
from .service import LogSummarizerService, failed_summary

__all__ = [
    "LogSummarizerService",
    "LogSummary",
    "failed_summary",
    "BaseLLMProvider",
    "GroqProvider",
    "GeminiProvider",
    "get_default_provider",
]
