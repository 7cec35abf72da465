"""
Schemas for the generative log summary.
"""

from typing import List

from pydantic import AliasChoices, BaseModel, Field


class LogSummary(BaseModel):
    """Open-ended findings extracted from a log by a language model."""

    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    incomplete_transactions: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "incomplete_transactions", "incompleteTransactions"
        ),
    )
