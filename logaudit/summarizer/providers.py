"""
LLM Provider implementations for log summarization.

Supports multiple LLM backends via a provider pattern.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_groq import ChatGroq

from logaudit.core.config import settings

logger = logging.getLogger(__name__)


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def get_llm(self) -> BaseChatModel:
        """Get the LangChain LLM instance."""
        pass

    async def invoke(self, system_prompt: str, user_prompt: str) -> str:
        """
        Invoke the LLM with prompts.

        Args:
            system_prompt: System instructions
            user_prompt: Log content to analyze

        Returns:
            LLM response text
        """
        llm = self.get_llm()

        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt),
        ]
        response = await llm.ainvoke(messages)
        return _content_text(response.content)

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        pass


def _content_text(content) -> str:
    """Flatten LangChain message content (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class GroqProvider(BaseLLMProvider):
    """Groq LLM provider."""

    def __init__(self, model: Optional[str] = None):
        self.model = model or settings.GROQ_LLM_MODEL
        if not self.model:
            raise ValueError("GROQ_LLM_MODEL not configured. Please set it in environment variables.")
        self._llm: Optional[ChatGroq] = None

    def get_llm(self) -> ChatGroq:
        """Get or create the Groq LLM instance."""
        if self._llm is None:
            if not settings.GROQ_API_KEY:
                raise ValueError(
                    "GROQ_API_KEY not configured. Please set it in environment variables."
                )
            self._llm = ChatGroq(
                model=self.model,
                api_key=settings.GROQ_API_KEY,
                temperature=settings.LOG_SUMMARY_LLM_TEMPERATURE,
            )
            logger.info(f"GroqProvider initialized with model: {self.model}")
        return self._llm

    @property
    def name(self) -> str:
        return "groq"


class GeminiProvider(BaseLLMProvider):
    """Google Gemini LLM provider."""

    def __init__(self, model: Optional[str] = None):
        self.model = model or settings.GEMINI_LLM_MODEL
        if not self.model:
            raise ValueError("GEMINI_LLM_MODEL not configured. Please set it in environment variables.")
        self._llm: Optional[ChatGoogleGenerativeAI] = None

    def get_llm(self) -> ChatGoogleGenerativeAI:
        """Get or create the Gemini LLM instance."""
        if self._llm is None:
            if not settings.GEMINI_API_KEY:
                raise ValueError(
                    "GEMINI_API_KEY not configured. Please set it in environment variables."
                )
            self._llm = ChatGoogleGenerativeAI(
                model=self.model,
                google_api_key=settings.GEMINI_API_KEY,
                temperature=settings.LOG_SUMMARY_LLM_TEMPERATURE,
            )
            logger.info(f"GeminiProvider initialized with model: {self.model}")
        return self._llm

    @property
    def name(self) -> str:
        return "gemini"


def get_default_provider() -> BaseLLMProvider:
    """
    Get the default LLM provider based on available configuration.

    Priority:
    1. Groq (if GROQ_API_KEY is set)
    2. Gemini (if GEMINI_API_KEY is set)

    Raises:
        ValueError: If no LLM provider is configured
    """
    if settings.GROQ_API_KEY:
        logger.info("Using Groq as default LLM provider")
        return GroqProvider()

    if settings.GEMINI_API_KEY:
        logger.info("Using Gemini as default LLM provider")
        return GeminiProvider()

    raise ValueError(
        "No LLM provider configured. Please set GROQ_API_KEY or GEMINI_API_KEY."
    )
