"""
Secret masking for log text that leaves the process.

Components:
- mask_secrets(): Fast regex for secrets in logs (AWS keys, tokens, etc.)
- redact_for_log(): Shows "[CONTENT: X chars]" for safe logging
"""

import logging
import re

logger = logging.getLogger(__name__)


# Regex patterns for secret detection in logs
SAFETY_NET_PATTERNS = {
    "aws_key": re.compile(r"\bAKIA[A-Z0-9]{16}\b"),
    "github_token": re.compile(r"\b(?:ghp_|gho_|ghu_|ghs_|ghr_)[A-Za-z0-9_]{36,}\b"),
    "slack_token": re.compile(r"\bxox[baprs]-[A-Za-z0-9\-]+\b"),
    "jwt": re.compile(r"\beyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\b"),
    "connection_string": re.compile(
        r"(?:postgresql|mysql|mongodb|redis)(?:\+\w+)?://[^\s]+",
        re.IGNORECASE,
    ),
}


def mask_secrets(text: str) -> str:
    """
    Fast regex-only masking for secrets in logs.

    Applied before log content is sent to an external summarization service.
    Only catches: AWS keys, GitHub tokens, Slack tokens, JWTs, DB connection strings.

    Args:
        text: Log text that may accidentally contain secrets

    Returns:
        Text with secrets masked
    """
    if not text or not isinstance(text, str):
        return text

    masked = text
    for name, pattern in SAFETY_NET_PATTERNS.items():
        masked = pattern.sub(f"[{name.upper()}]", masked)
    return masked


def redact_for_log(text: str) -> str:
    """Describe text by size only, so document content never reaches our own logs."""
    if not text:
        return "[CONTENT: empty]"
    return f"[CONTENT: {len(text)} chars]"
