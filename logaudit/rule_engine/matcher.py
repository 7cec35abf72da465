"""
Pattern and timestamp helpers shared by every rule evaluator.

All helpers are pure: they never mutate their input and never raise for
document content.
"""

import re
from datetime import datetime
from typing import List, Optional

# Leading "YYYY-MM-DD HH:MM:SS" on a log line
LINE_TIMESTAMP_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})")
LINE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# parseInt-style prefix: optional whitespace, sign, digits
_LEADING_INT_PATTERN = re.compile(r"\s*([+-]?\d+)")


def parse_line_timestamp(line: str) -> Optional[datetime]:
    """
    Extract the timestamp at the start of a line.

    Returns None when the line has no timestamp, or when it has the right
    shape but is not a real calendar instant (e.g. month 13).
    """
    match = LINE_TIMESTAMP_PATTERN.match(line)
    if not match:
        return None
    try:
        return datetime.strptime(match.group(1), LINE_TIMESTAMP_FORMAT)
    except ValueError:
        return None


def find_matches(pattern: re.Pattern, text: str) -> List[str]:
    """All non-overlapping matches in document order, whitespace-trimmed."""
    return [match.group(0).strip() for match in pattern.finditer(text)]


def has_match(pattern: re.Pattern, text: str) -> bool:
    return pattern.search(text) is not None


def capture_group_values(
    pattern: re.Pattern, text: str, group_index: int
) -> List[Optional[str]]:
    """
    Value of one capture group for every match, in match order.

    A group that did not participate in a match, or an index beyond the
    pattern's groups, yields None for that match.
    """
    values: List[Optional[str]] = []
    for match in pattern.finditer(text):
        if group_index > pattern.groups:
            values.append(None)
        else:
            values.append(match.group(group_index))
    return values


def parse_leading_int(value: Optional[str]) -> Optional[int]:
    """
    Integer at the start of value, or None.

    Mirrors how log tooling usually reads counters: "16 requests" -> 16,
    "abc" -> None. Digit runs too long for int() also give None.
    """
    if not value:
        return None
    match = _LEADING_INT_PATTERN.match(value)
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        return None
