"""
Pytest configuration and shared fixtures for LogAudit tests.
"""

import os

# Set required environment variables BEFORE importing app modules
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("ENVIRONMENT", "test")
# Note: This is a test-only dummy value, not a real secret
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")
os.environ.setdefault("GROQ_LLM_MODEL", "test-groq-model")

import pytest
from unittest.mock import AsyncMock

from logaudit.summarizer.providers import BaseLLMProvider


# ========== Sample Documents ==========

DETAILS_LOG = """2024-05-01 10:00:00 System startup sequence initiated
2024-05-01 10:00:01 License check: VALID
2024-05-01 10:00:02 All services started successfully
2024-05-01 10:00:03 Handshake with peer 10.0.0.7 successful
2024-05-01 10:00:04 Tracker announce successful
2024-05-01 10:00:05 Sent a not interested message
2024-05-01 10:00:06 Sent an interested message
2024-05-01 10:00:07 Sent 16 requests for data
2024-05-01 10:00:08 peer session started
2024-05-01 10:00:09 peer session ended
2024-05-01 10:00:10 Shutdown sequence complete
"""

TDR_XML = """<tdr>
  <started>1700000000000000000</started>
  <ended>1700000005500000000</ended>
  <netstat>true</netstat>
  <foi>true</foi>
  <file>movie.mkv (FOI)</file>
  <location><lat>1</lat><uncertainty>30</uncertainty></location>
</tdr>
"""

NETSTAT_STABLE = """Proto Recv-Q Send-Q Local Address Foreign Address State
tcp 0 0 10.0.0.2:6881 10.0.0.7:51413 ESTABLISHED
tcp 0 0 10.0.0.2:6881 10.0.0.8:51413 ESTABLISHED
"""


class FakeProvider(BaseLLMProvider):
    """LLM provider whose invoke() is an AsyncMock."""

    def __init__(self, reply: str = "", error: Exception = None):
        self.invoke = AsyncMock(return_value=reply, side_effect=error)

    def get_llm(self):
        raise AssertionError("FakeProvider never builds a real LLM")

    @property
    def name(self) -> str:
        return "fake"


@pytest.fixture
def details_log():
    return DETAILS_LOG


@pytest.fixture
def tdr_xml():
    return TDR_XML


@pytest.fixture
def netstat_stable():
    return NETSTAT_STABLE


@pytest.fixture
def summary_reply():
    return (
        '{"errors": ["disk full"], "warnings": ["slow tracker"], '
        '"incomplete_transactions": ["piece 4 never verified"]}'
    )


@pytest.fixture
def make_provider():
    """Factory for fake providers with a canned reply or error."""
    return FakeProvider


@pytest.fixture
def fake_provider(summary_reply):
    return FakeProvider(reply=summary_reply)
