"""
Deterministic evaluators, one per rule kind.

Each evaluator takes (rule, document, auxiliary_document) and returns an
AnalysisOutcome. No evaluator raises for document content: missing tags,
missing capture groups or an empty document all end up as findings.
"""

import functools
import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from .matcher import (
    capture_group_values,
    find_matches,
    has_match,
    parse_leading_int,
    parse_line_timestamp,
)
from .schemas import (
    AnalysisOutcome,
    CompletionDetails,
    CompletionRule,
    ComplianceStatus,
    ConditionalPresenceRule,
    CountRule,
    PresenceRule,
    SequenceRule,
    Severity,
    TagTimestampRule,
)

SEQUENCE_BOUNDARY = "---"

CONDITION_NOT_MET_FINDING = (
    "Condition for this check was not met; check is not applicable."
)

NANOS_PER_MILLI = 1_000_000
MILLIS_PER_SECOND = 1_000
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_NANOS_VALUE_PATTERN = re.compile(r"\s*[+-]?\d+\s*")

# Peer-churn correlation with a netstat dump
PEER_CHURN_RULE_ID = "rapid-peer-churn"
CHURN_LOG_EVENT_THRESHOLD = 100
CHURN_MIN_TRACKED_CONNECTIONS = 20
CHURN_MIN_ESTABLISHED_CONNECTIONS = 5
NETSTAT_ESTABLISHED_PATTERN = re.compile(
    r"^ *tcp.*ESTABLISHED", re.IGNORECASE | re.MULTILINE
)
NETSTAT_CLOSING_PATTERN = re.compile(
    r"^ *tcp.*(TIME_WAIT|CLOSE_WAIT|FIN_WAIT_1|FIN_WAIT_2)",
    re.IGNORECASE | re.MULTILINE,
)


# ========== Helpers ==========


def _presence_status(
    is_present: bool, expect_present: bool, severity: Severity
) -> ComplianceStatus:
    if is_present == expect_present:
        return ComplianceStatus.COMPLIANT
    if severity == Severity.WARNING:
        return ComplianceStatus.WARNING
    return ComplianceStatus.NON_COMPLIANT


def _truncate_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


@functools.lru_cache(maxsize=128)
def _tag_value_pattern(tag: str) -> re.Pattern:
    escaped = re.escape(tag)
    return re.compile(rf"<{escaped}>(.*?)</{escaped}>")


def _extract_tag_value(tag: str, document: str) -> Optional[str]:
    match = _tag_value_pattern(tag).search(document)
    if not match or not match.group(1):
        return None
    return match.group(1)


def _parse_nanos(value: str) -> Optional[int]:
    if not _NANOS_VALUE_PATTERN.fullmatch(value):
        return None
    try:
        return int(value)
    except ValueError:
        # beyond the interpreter's int string conversion limit
        return None


def _format_instant(nanos: int) -> str:
    """UTC rendering of a nanosecond instant, truncated to milliseconds."""
    millis = _truncate_div(nanos, NANOS_PER_MILLI)
    try:
        instant = EPOCH + timedelta(milliseconds=millis)
    except OverflowError:
        return "unrepresentable instant"
    return (
        f"{instant.strftime('%Y-%m-%d %H:%M:%S')}."
        f"{instant.microsecond // 1000:03d} UTC"
    )


def _format_duration_seconds(nanos: int) -> str:
    """Exact nanosecond duration as seconds with 3 decimals, rounded half-up."""
    millis, remainder = divmod(abs(nanos), NANOS_PER_MILLI)
    if remainder * 2 >= NANOS_PER_MILLI:
        millis += 1
    seconds, fraction = divmod(millis, MILLIS_PER_SECOND)
    sign = "-" if nanos < 0 and millis else ""
    return f"{sign}{seconds}.{fraction:03d}"


# ========== Presence Rules ==========


def evaluate_presence(
    rule: PresenceRule, document: str, auxiliary_document: Optional[str] = None
) -> AnalysisOutcome:
    """Compliant iff the pattern's presence matches expect_present.

    Findings are the matches either way: when absence is expected they are
    the evidence of the violation.
    """
    findings = find_matches(rule.pattern, document)
    return AnalysisOutcome(
        rule_id=rule.id,
        status=_presence_status(bool(findings), rule.expect_present, rule.severity),
        findings=findings,
    )


def evaluate_conditional_presence(
    rule: ConditionalPresenceRule,
    document: str,
    auxiliary_document: Optional[str] = None,
) -> AnalysisOutcome:
    """Presence check on target_pattern, vacuously compliant without the condition."""
    if not has_match(rule.condition_pattern, document):
        return AnalysisOutcome(
            rule_id=rule.id,
            status=ComplianceStatus.COMPLIANT,
            findings=[CONDITION_NOT_MET_FINDING],
        )

    findings = find_matches(rule.target_pattern, document)
    return AnalysisOutcome(
        rule_id=rule.id,
        status=_presence_status(bool(findings), rule.expect_present, rule.severity),
        findings=findings,
    )


# ========== Count Rules ==========


def evaluate_count(
    rule: CountRule, document: str, auxiliary_document: Optional[str] = None
) -> AnalysisOutcome:
    """Compliant iff the match count (or capture-group sum) is within max_occurrences."""
    findings = find_matches(rule.pattern, document)

    if rule.sum_capture_group_index:
        values = capture_group_values(
            rule.pattern, document, rule.sum_capture_group_index
        )
        finding_count = sum(parse_leading_int(value) or 0 for value in values)
    else:
        finding_count = len(findings)

    outcome = AnalysisOutcome(
        rule_id=rule.id,
        status=(
            ComplianceStatus.COMPLIANT
            if finding_count <= rule.max_occurrences
            else ComplianceStatus.NON_COMPLIANT
        ),
        findings=findings,
        finding_count=finding_count,
    )

    if rule.id == PEER_CHURN_RULE_ID and auxiliary_document:
        outcome = apply_peer_churn_override(outcome, auxiliary_document)

    return outcome


def apply_peer_churn_override(
    outcome: AnalysisOutcome, netstat_document: str
) -> AnalysisOutcome:
    """
    Correlate the log's peer session churn with a netstat snapshot.

    Only ever tightens the verdict: when the combined evidence points to
    connection cycling, the outcome becomes non-compliant and its findings are
    replaced by a single explanation. Otherwise the log-only outcome stands.
    """
    established = len(NETSTAT_ESTABLISHED_PATTERN.findall(netstat_document))
    closing = len(NETSTAT_CLOSING_PATTERN.findall(netstat_document))
    log_churn = outcome.finding_count or 0

    high_log_churn = log_churn > CHURN_LOG_EVENT_THRESHOLD
    unstable_netstat = (
        closing > established
        and established + closing > CHURN_MIN_TRACKED_CONNECTIONS
    )

    if high_log_churn and unstable_netstat:
        message = (
            f"Critical churn detected. The log shows {log_churn} connection events, "
            f"and the netstat data reveals an unstable network state with {closing} "
            f"connections closing and only {established} fully established. This "
            "strongly indicates rapid, failed connection cycling."
        )
    elif unstable_netstat:
        message = (
            "Unstable network state detected. The netstat data shows a high number "
            f"of closing connections ({closing}) compared to established ones "
            f"({established}). This is a strong indicator of connection churn."
        )
    elif (
        high_log_churn
        and established < CHURN_MIN_ESTABLISHED_CONNECTIONS
        and closing == 0
    ):
        message = (
            f"High peer churn detected. The log shows {log_churn} connection events, "
            f"while the netstat snapshot shows only {established} established "
            "connections. This suggests highly unstable or brief sessions."
        )
    else:
        return outcome

    return outcome.model_copy(
        update={"status": ComplianceStatus.NON_COMPLIANT, "findings": [message]}
    )


# ========== Sequence Rules ==========


def evaluate_sequence(
    rule: SequenceRule, document: str, auxiliary_document: Optional[str] = None
) -> AnalysisOutcome:
    """
    Count completed walks through rule.steps, line by line.

    A step accepted more than max_time_gap_seconds after the previous one
    (both lines timestamped) abandons the attempt; the same line is then
    re-tested as the first step of a new attempt.
    """
    completed = 0
    findings: List[str] = []
    step = 0
    last_timestamp: Optional[datetime] = None
    attempt: List[str] = []

    for line in document.split("\n"):
        if not rule.steps[step].search(line):
            continue

        timestamp = parse_line_timestamp(line)
        if step > 0 and timestamp is not None and last_timestamp is not None:
            gap = (timestamp - last_timestamp).total_seconds()
            if gap > rule.max_time_gap_seconds:
                step = 0
                attempt = []

        if step == 0 and not rule.steps[0].search(line):
            continue

        attempt.append(line.strip())
        last_timestamp = timestamp
        step += 1

        if step == len(rule.steps):
            completed += 1
            findings.extend(attempt)
            findings.append(SEQUENCE_BOUNDARY)
            step = 0
            attempt = []

    return AnalysisOutcome(
        rule_id=rule.id,
        status=(
            ComplianceStatus.COMPLIANT
            if completed <= rule.max_occurrences
            else ComplianceStatus.NON_COMPLIANT
        ),
        findings=findings[:-1] if findings else [],
        finding_count=completed,
    )


# ========== Completion Rules ==========


def evaluate_completion(
    rule: CompletionRule, document: str, auxiliary_document: Optional[str] = None
) -> AnalysisOutcome:
    """Non-compliant on the first progress report with possessed < total.

    No report at all counts as compliant.
    """
    for match in rule.peer_progress_pattern.finditer(document):
        possessed = parse_leading_int(match.group(1))
        total = parse_leading_int(match.group(2))
        if possessed is None or total is None:
            continue
        if possessed < total:
            return AnalysisOutcome(
                rule_id=rule.id,
                status=ComplianceStatus.NON_COMPLIANT,
                findings=[
                    "Remote peer is not a full seed. It reported possessing "
                    f"{possessed} of {total} pieces."
                ],
                completion_details=CompletionDetails(possessed=possessed, total=total),
            )

    return AnalysisOutcome(rule_id=rule.id, status=ComplianceStatus.COMPLIANT)


# ========== Tag Timestamp Rules ==========


def evaluate_tag_timestamp(
    rule: TagTimestampRule, document: str, auxiliary_document: Optional[str] = None
) -> AnalysisOutcome:
    """Validate <start_tag>/<end_tag> nanosecond instants and report the duration."""
    raw_values = {
        rule.start_tag: _extract_tag_value(rule.start_tag, document),
        rule.end_tag: _extract_tag_value(rule.end_tag, document),
    }

    missing = [tag for tag, value in raw_values.items() if value is None]
    if missing:
        return AnalysisOutcome(
            rule_id=rule.id,
            status=ComplianceStatus.NON_COMPLIANT,
            findings=[f"Required tag <{tag}> not found or is empty." for tag in missing],
        )

    start_raw = raw_values[rule.start_tag]
    end_raw = raw_values[rule.end_tag]
    start_nanos = _parse_nanos(start_raw)
    end_nanos = _parse_nanos(end_raw)

    unparseable = [
        tag
        for tag, nanos in ((rule.start_tag, start_nanos), (rule.end_tag, end_nanos))
        if nanos is None
    ]
    if unparseable:
        return AnalysisOutcome(
            rule_id=rule.id,
            status=ComplianceStatus.NON_COMPLIANT,
            findings=[f"Could not parse value from tag: <{tag}>" for tag in unparseable],
        )

    # Clock skew can make the duration negative; it is still reported.
    duration_nanos = end_nanos - start_nanos
    return AnalysisOutcome(
        rule_id=rule.id,
        status=ComplianceStatus.COMPLIANT,
        findings=[
            f"Start time: {_format_instant(start_nanos)} ({start_raw})",
            f"End time: {_format_instant(end_nanos)} ({end_raw})",
            f"Calculated duration: {_format_duration_seconds(duration_nanos)} seconds",
        ],
    )
