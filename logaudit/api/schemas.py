"""
Request and response schemas for the compliance API.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from logaudit.rule_engine.schemas import AnalysisOutcome, StandardKind


class StandardSummary(BaseModel):
    id: str
    name: str
    description: str
    kind: StandardKind
    rule_ids: List[str] = Field(default_factory=list)


class EvaluateRequest(BaseModel):
    standard_id: str
    content: str
    auxiliary_content: Optional[str] = None  # e.g. a netstat dump


class EvaluateResponse(BaseModel):
    standard_id: str
    outcomes: List[AnalysisOutcome]


class SummarizeRequest(BaseModel):
    content: str


class UploadedFile(BaseModel):
    name: str
    content: str


class FileSetPayload(BaseModel):
    id: str = Field(min_length=1)
    details: Optional[UploadedFile] = None
    xml: Optional[UploadedFile] = None
    netstat: Optional[UploadedFile] = None


class BatchRequest(BaseModel):
    file_sets: List[FileSetPayload] = Field(min_length=1)
