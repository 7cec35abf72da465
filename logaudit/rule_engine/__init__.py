"""
Rule engine for deterministic compliance checks over log and report text.

Evaluates a standard's declarative rules (presence, counts, timed sequences,
peer completion, tag timestamps and OR-combinations) against one document
without any I/O.
"""

from .exceptions import RuleEngineError, StandardDefinitionError, StandardNotFoundError
from .schemas import (
    AnalysisOutcome,
    BaseRule,
    CompletionDetails,
    CompletionRule,
    ComplianceStatus,
    CompoundOperator,
    CompoundRule,
    ConditionalPresenceRule,
    CountRule,
    PresenceRule,
    Rule,
    SequenceRule,
    Severity,
    Standard,
    StandardKind,
    TagTimestampRule,
)
from .service import RuleEngineService, evaluate, rule_engine_service

__all__ = [
    "RuleEngineService",
    "rule_engine_service",
    "evaluate",
    "AnalysisOutcome",
    "BaseRule",
    "CompletionDetails",
    "CompletionRule",
    "ComplianceStatus",
    "CompoundOperator",
    "CompoundRule",
    "ConditionalPresenceRule",
    "CountRule",
    "PresenceRule",
    "Rule",
    "SequenceRule",
    "Severity",
    "Standard",
    "StandardKind",
    "TagTimestampRule",
    "RuleEngineError",
    "StandardDefinitionError",
    "StandardNotFoundError",
]
