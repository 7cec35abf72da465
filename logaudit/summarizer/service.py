"""
LogSummarizerService - open-ended log analysis through a language model.

Backs the "ai" standard. It is the only network-bound step of a batch and
it never raises: any failure becomes a single synthetic error entry.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from logaudit.core.config import settings
from logaudit.utils.data_masker import mask_secrets, redact_for_log

from .prompts import SYSTEM_PROMPT, build_user_prompt
from .providers import BaseLLMProvider, get_default_provider
from .schemas import LogSummary

logger = logging.getLogger(__name__)

API_KEY_NOT_CONFIGURED_MESSAGE = (
    "The AI analysis failed. The language model API key is not configured correctly."
)
UNPARSEABLE_RESPONSE_MESSAGE = (
    "The AI analysis failed. The model returned a response that could not be parsed."
)
GENERIC_FAILURE_MESSAGE = (
    "The AI analysis failed. This could be due to a network issue or an API error. "
    "Please check the service logs for technical details."
)


def failed_summary(message: str) -> LogSummary:
    return LogSummary(errors=[message])


class LogSummarizerService:
    """Summarize a log into errors, warnings and incomplete transactions."""

    def __init__(
        self,
        provider: Optional[BaseLLMProvider] = None,
        max_input_chars: Optional[int] = None,
    ):
        self._provider = provider
        self.max_input_chars = max_input_chars or settings.LOG_SUMMARY_MAX_INPUT_CHARS

    def _get_provider(self) -> BaseLLMProvider:
        if self._provider is None:
            self._provider = get_default_provider()
        return self._provider

    def prepare_content(self, content: str) -> str:
        """Mask secrets and truncate to the model input budget."""
        masked = mask_secrets(content)
        if len(masked) > self.max_input_chars:
            logger.info(
                f"Truncating log from {len(masked)} to {self.max_input_chars} chars for summarization"
            )
            masked = masked[: self.max_input_chars]
        return masked

    async def summarize(self, content: str) -> LogSummary:
        """
        Summarize log content. Never raises.

        Returns:
            LogSummary parsed from the model output, or a summary holding one
            synthetic error message when the call or the parsing fails.
        """
        try:
            provider = self._get_provider()
        except ValueError as e:
            logger.warning(f"Log summarization unavailable: {e}")
            return failed_summary(API_KEY_NOT_CONFIGURED_MESSAGE)

        logger.info(
            f"Summarizing {redact_for_log(content)} with provider {provider.name}"
        )

        try:
            output_text = await provider.invoke(
                SYSTEM_PROMPT, build_user_prompt(self.prepare_content(content))
            )
        except Exception as e:
            logger.error(f"Log summarization via {provider.name} failed: {e}", exc_info=True)
            if "api key" in str(e).lower() or "api_key" in str(e).lower():
                return failed_summary(API_KEY_NOT_CONFIGURED_MESSAGE)
            return failed_summary(GENERIC_FAILURE_MESSAGE)

        try:
            return self._parse_summary(output_text)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                f"Failed to parse summary output: {e}. Raw: {output_text[:300]}"
            )
            return failed_summary(UNPARSEABLE_RESPONSE_MESSAGE)

    # ------------------------------------------------------------------
    # Parsing helpers
    # ------------------------------------------------------------------

    def _parse_summary(self, output_text: str) -> LogSummary:
        """Parse the model's JSON reply, tolerating markdown code fences."""
        json_str = output_text.strip()
        if json_str.startswith("```"):
            lines = json_str.split("\n")
            json_str = "\n".join(
                line for line in lines if not line.strip().startswith("```")
            )

        raw = json.loads(json_str)
        return LogSummary.model_validate(raw)
