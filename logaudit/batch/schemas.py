"""
Schemas for batch analysis results.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from logaudit.ingestion.schemas import FileHashes
from logaudit.rule_engine.schemas import AnalysisOutcome, ComplianceStatus
from logaudit.summarizer.schemas import LogSummary


class DocumentInfo(BaseModel):
    """A document that took part in a batch, without its content."""

    name: str
    relative_path: str
    file_set_id: str
    hashes: FileHashes


class StandardReport(BaseModel):
    """Result of one (document, standard) evaluation."""

    document: str  # LoadedFile.relative_path
    file_set_id: str
    standard_id: str
    outcomes: Optional[List[AnalysisOutcome]] = None  # rule standards
    summary: Optional[LogSummary] = None  # summary standard


class BatchResult(BaseModel):
    """All reports of a batch, keyed by document then standard id."""

    batch_id: str
    documents: Dict[str, DocumentInfo] = Field(default_factory=dict)
    results: Dict[str, Dict[str, StandardReport]] = Field(default_factory=dict)

    def get(self, document: str, standard_id: str) -> Optional[StandardReport]:
        return self.results.get(document, {}).get(standard_id)

    def summary_counts(self) -> Dict[str, int]:
        """Rule outcome totals per status across every document and standard."""
        counts = {status.value: 0 for status in ComplianceStatus}
        for reports in self.results.values():
            for report in reports.values():
                for outcome in report.outcomes or []:
                    counts[outcome.status.value] += 1
        return counts
