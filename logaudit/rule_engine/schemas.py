"""
Schemas for rule definitions, standards and rule engine output.

Rules are declarative and immutable: a standard is defined once (in code or
from plain data) and evaluated many times. Patterns are compiled when the rule
is built, so a malformed pattern fails the standard's load, never an
evaluation.
"""

import re
from enum import Enum
from typing import Annotated, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    """How a failed presence check is reported."""

    WARNING = "warning"
    ERROR = "error"


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    WARNING = "warning"
    NON_COMPLIANT = "non-compliant"


class CompoundOperator(str, Enum):
    OR = "OR"


class StandardKind(str, Enum):
    RULES = "rules"  # evaluated by the rule engine
    SUMMARY = "summary"  # open-ended generative summarization, no rules


# ========== Rules ==========


class BaseRule(BaseModel):
    """Fields shared by every rule variant."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: str = Field(min_length=1)
    description: str = ""


class PresenceRule(BaseRule):
    """Pattern must (or must not) occur in the document."""

    type: Literal["presence"] = "presence"
    pattern: re.Pattern
    expect_present: bool = True
    severity: Severity = Severity.ERROR


class ConditionalPresenceRule(BaseRule):
    """Presence check on target_pattern, applied only when condition_pattern matches."""

    type: Literal["conditional-presence"] = "conditional-presence"
    condition_pattern: re.Pattern
    target_pattern: re.Pattern
    expect_present: bool = True
    severity: Severity = Severity.ERROR


class CountRule(BaseRule):
    """Number of matches (or sum of a numeric capture group) must not exceed a limit."""

    type: Literal["count"] = "count"
    pattern: re.Pattern
    max_occurrences: int = Field(ge=0)
    sum_capture_group_index: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _check_capture_group(self) -> "CountRule":
        index = self.sum_capture_group_index
        if index is not None and index > self.pattern.groups:
            raise ValueError(
                f"sum_capture_group_index {index} exceeds the {self.pattern.groups} "
                f"capture group(s) of pattern {self.pattern.pattern!r}"
            )
        return self


class SequenceRule(BaseRule):
    """Ordered steps, each within max_time_gap_seconds of the previous one."""

    type: Literal["sequence"] = "sequence"
    steps: Tuple[re.Pattern, ...] = Field(min_length=1)
    max_time_gap_seconds: float = Field(ge=0)
    max_occurrences: int = Field(ge=0)


class CompletionRule(BaseRule):
    """
    Remote peer must report holding every piece.

    peer_progress_pattern must expose two capture groups: possessed, total.
    """

    type: Literal["completion"] = "completion"
    peer_progress_pattern: re.Pattern

    @model_validator(mode="after")
    def _check_groups(self) -> "CompletionRule":
        if self.peer_progress_pattern.groups < 2:
            raise ValueError(
                "peer_progress_pattern must expose two capture groups (possessed, total)"
            )
        return self


class CompoundRule(BaseRule):
    """Boolean combination over the outcomes of other (non-compound) rules."""

    type: Literal["compound"] = "compound"
    depends_on_rule_ids: Tuple[str, ...] = Field(min_length=1)
    operator: CompoundOperator = CompoundOperator.OR
    severity: Literal["error"] = "error"


class TagTimestampRule(BaseRule):
    """Start/end nanosecond instants enclosed in <start_tag> and <end_tag>."""

    type: Literal["tag-timestamp"] = "tag-timestamp"
    start_tag: str = Field(min_length=1)
    end_tag: str = Field(min_length=1)


Rule = Annotated[
    Union[
        PresenceRule,
        ConditionalPresenceRule,
        CountRule,
        SequenceRule,
        CompletionRule,
        CompoundRule,
        TagTimestampRule,
    ],
    Field(discriminator="type"),
]


def validate_rule_set(rules: Sequence[BaseRule]) -> None:
    """
    Structural checks across the rules of one standard.

    Raises:
        ValueError: on duplicate rule ids, or a compound rule that depends on
            another compound rule.
    """
    seen = set()
    compound_ids = {rule.id for rule in rules if rule.type == "compound"}
    for rule in rules:
        if rule.id in seen:
            raise ValueError(f"Duplicate rule id '{rule.id}'")
        seen.add(rule.id)

    for rule in rules:
        if rule.type != "compound":
            continue
        nested = [dep for dep in rule.depends_on_rule_ids if dep in compound_ids]
        if nested:
            raise ValueError(
                f"Compound rule '{rule.id}' cannot depend on compound rule(s): "
                f"{', '.join(nested)}"
            )


class Standard(BaseModel):
    """A named, ordered set of rules applied to one kind of document."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    kind: StandardKind = StandardKind.RULES
    rules: Tuple[Rule, ...] = ()

    @model_validator(mode="after")
    def _check_rules(self) -> "Standard":
        validate_rule_set(self.rules)
        if self.kind == StandardKind.SUMMARY and self.rules:
            raise ValueError(f"Summary standard '{self.id}' cannot declare rules")
        return self


# ========== Outcomes ==========


class CompletionDetails(BaseModel):
    possessed: int
    total: int


class AnalysisOutcome(BaseModel):
    """Verdict for one rule against one document."""

    rule_id: str
    status: ComplianceStatus
    findings: List[str] = Field(default_factory=list)
    finding_count: Optional[int] = None  # count and sequence rules
    completion_details: Optional[CompletionDetails] = None  # completion rules
