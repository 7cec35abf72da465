"""
Rule engine service: runs a standard's rules against one document.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from .evaluators import (
    evaluate_completion,
    evaluate_conditional_presence,
    evaluate_count,
    evaluate_presence,
    evaluate_sequence,
    evaluate_tag_timestamp,
)
from .exceptions import StandardDefinitionError
from .schemas import (
    AnalysisOutcome,
    BaseRule,
    CompoundOperator,
    CompoundRule,
    ComplianceStatus,
    Standard,
    validate_rule_set,
)

logger = logging.getLogger(__name__)

RuleEvaluator = Callable[..., AnalysisOutcome]

# Every non-compound rule kind. Compound rules are resolved in a second pass.
RULE_EVALUATORS: Dict[str, RuleEvaluator] = {
    "presence": evaluate_presence,
    "conditional-presence": evaluate_conditional_presence,
    "count": evaluate_count,
    "sequence": evaluate_sequence,
    "completion": evaluate_completion,
    "tag-timestamp": evaluate_tag_timestamp,
}


def resolve_compound(
    rule: CompoundRule, outcomes_by_id: Dict[str, AnalysisOutcome]
) -> AnalysisOutcome:
    """
    Combine already-computed outcomes of the rules a compound rule depends on.

    A dependency that was never evaluated counts as not compliant.
    """
    statuses = [
        outcomes_by_id[rule_id].status if rule_id in outcomes_by_id else None
        for rule_id in rule.depends_on_rule_ids
    ]

    is_compliant = False
    if rule.operator == CompoundOperator.OR:
        is_compliant = any(status == ComplianceStatus.COMPLIANT for status in statuses)

    if is_compliant:
        return AnalysisOutcome(rule_id=rule.id, status=ComplianceStatus.COMPLIANT)

    return AnalysisOutcome(
        rule_id=rule.id,
        status=ComplianceStatus.NON_COMPLIANT,
        findings=[
            "This combination check failed because none of the required checks "
            f"passed ({', '.join(rule.depends_on_rule_ids)})."
        ],
    )


class RuleEngineService:
    """Deterministic compliance verdicts for one document against one rule list."""

    def evaluate(
        self,
        document: str,
        auxiliary_document: Optional[str],
        rules: Sequence[BaseRule],
    ) -> List[AnalysisOutcome]:
        """
        Evaluate every rule and return one outcome per rule, in rule order.

        All non-compound rules run first, then compound rules, regardless of
        declared order.

        Raises:
            StandardDefinitionError: if the rule list is structurally invalid.
        """
        try:
            validate_rule_set(rules)
        except ValueError as e:
            raise StandardDefinitionError(str(e)) from e

        outcomes_by_id: Dict[str, AnalysisOutcome] = {}

        for rule in rules:
            if rule.type == "compound":
                continue
            evaluator = RULE_EVALUATORS.get(rule.type)
            if evaluator is None:
                outcomes_by_id[rule.id] = AnalysisOutcome(
                    rule_id=rule.id,
                    status=ComplianceStatus.NON_COMPLIANT,
                    findings=[f"Rule type '{rule.type}' not implemented"],
                )
                continue
            outcomes_by_id[rule.id] = evaluator(rule, document, auxiliary_document)

        for rule in rules:
            if rule.type == "compound":
                outcomes_by_id[rule.id] = resolve_compound(rule, outcomes_by_id)

        outcomes = [outcomes_by_id[rule.id] for rule in rules]

        non_compliant = sum(
            1 for o in outcomes if o.status == ComplianceStatus.NON_COMPLIANT
        )
        logger.debug(
            f"Rule engine evaluated {len(outcomes)} rules over {len(document)} chars: "
            f"{non_compliant} non-compliant"
        )
        return outcomes

    def evaluate_standard(
        self,
        standard: Standard,
        document: str,
        auxiliary_document: Optional[str] = None,
    ) -> List[AnalysisOutcome]:
        """Evaluate a standard's declared rules against a document."""
        return self.evaluate(document, auxiliary_document, standard.rules)


rule_engine_service = RuleEngineService()


def evaluate(
    document: str,
    auxiliary_document: Optional[str],
    rules: Sequence[BaseRule],
) -> List[AnalysisOutcome]:
    """Core entry point: outcomes for rules against document, in rule order."""
    return rule_engine_service.evaluate(document, auxiliary_document, rules)
