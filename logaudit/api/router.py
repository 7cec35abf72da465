"""
FastAPI router for compliance endpoints
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from logaudit.batch.schemas import BatchResult
from logaudit.batch.service import BatchCoordinator
from logaudit.ingestion.service import build_file_set
from logaudit.rule_engine.exceptions import (
    StandardDefinitionError,
    StandardNotFoundError,
)
from logaudit.rule_engine.schemas import StandardKind
from logaudit.rule_engine.service import rule_engine_service
from logaudit.standards import get_standard, list_standards
from logaudit.summarizer.schemas import LogSummary
from logaudit.summarizer.service import LogSummarizerService

from .schemas import (
    BatchRequest,
    EvaluateRequest,
    EvaluateResponse,
    FileSetPayload,
    StandardSummary,
    SummarizeRequest,
    UploadedFile,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compliance", tags=["compliance"])


# Dependencies
def get_rule_engine():
    """Dependency to get the rule engine instance"""
    return rule_engine_service


def get_summarizer() -> LogSummarizerService:
    """Dependency to get a summarizer bound to the configured LLM provider"""
    return LogSummarizerService()


def get_batch_coordinator(
    rule_engine=Depends(get_rule_engine),
    summarizer: LogSummarizerService = Depends(get_summarizer),
) -> BatchCoordinator:
    return BatchCoordinator(rule_engine=rule_engine, summarizer=summarizer)


def _as_pair(uploaded: UploadedFile):
    return (uploaded.name, uploaded.content) if uploaded else None


def _to_file_set(payload: FileSetPayload):
    return build_file_set(
        payload.id,
        details=_as_pair(payload.details),
        xml=_as_pair(payload.xml),
        netstat=_as_pair(payload.netstat),
    )


# ==================== ROUTES ====================


@router.get("/standards", response_model=List[StandardSummary])
async def get_standards():
    """List the built-in compliance standards"""
    return [
        StandardSummary(
            id=standard.id,
            name=standard.name,
            description=standard.description,
            kind=standard.kind,
            rule_ids=[rule.id for rule in standard.rules],
        )
        for standard in list_standards()
    ]


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_document(
    request: EvaluateRequest,
    rule_engine=Depends(get_rule_engine),
):
    """Evaluate one document against one rule-based standard"""
    try:
        standard = get_standard(request.standard_id)
    except StandardNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if standard.kind == StandardKind.SUMMARY:
        raise HTTPException(
            status_code=400,
            detail=f"Standard '{standard.id}' is a summary standard; use /compliance/summarize",
        )

    try:
        outcomes = rule_engine.evaluate_standard(
            standard, request.content, request.auxiliary_content
        )
    except StandardDefinitionError as e:
        logger.error(f"Standard definition error while evaluating: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    return EvaluateResponse(standard_id=standard.id, outcomes=outcomes)


@router.post("/summarize", response_model=LogSummary)
async def summarize_document(
    request: SummarizeRequest,
    summarizer: LogSummarizerService = Depends(get_summarizer),
):
    """Summarize a log with the configured LLM provider"""
    return await summarizer.summarize(request.content)


@router.post("/batch", response_model=BatchResult)
async def run_batch(
    request: BatchRequest,
    http_request: Request,
    coordinator: BatchCoordinator = Depends(get_batch_coordinator),
):
    """Evaluate uploaded file-sets against their standards"""
    file_sets = [_to_file_set(payload) for payload in request.file_sets]
    batch_id = getattr(http_request.state, "request_id", None)
    try:
        return await coordinator.run(file_sets, batch_id=batch_id)
    except StandardDefinitionError as e:
        logger.error(f"Standard definition error in batch: {e}")
        raise HTTPException(status_code=422, detail=str(e))
