"""
BatchCoordinator - runs every file-set's documents against their standards.

Per file-set:
- details log: general, bittorrent and security standards (with the netstat
  dump as auxiliary document) plus the AI summary
- XML report: xml-tdr standard, no auxiliary document

Each (document, standard) evaluation is independent. Rule evaluations are CPU
bound and run in worker threads; summaries await the LLM. A semaphore bounds
how many run at once.
"""

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from logaudit.core.config import settings
from logaudit.core.logging_config import batch_scope, document_scope
from logaudit.ingestion.schemas import FileSet, LoadedFile
from logaudit.rule_engine.schemas import Standard, StandardKind
from logaudit.rule_engine.service import RuleEngineService, rule_engine_service
from logaudit.standards import DETAILS_STANDARD_IDS, XML_STANDARD_IDS, get_standard
from logaudit.summarizer.service import LogSummarizerService

from .schemas import BatchResult, DocumentInfo, StandardReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentJob:
    """One document and the standards it is checked against."""

    file_set_id: str
    document: LoadedFile
    standards: Sequence[Standard]
    auxiliary_document: Optional[str] = None


class BatchCoordinator:
    """Concurrent evaluation of file-sets, merged by (document, standard)."""

    def __init__(
        self,
        rule_engine: Optional[RuleEngineService] = None,
        summarizer: Optional[LogSummarizerService] = None,
        max_concurrency: Optional[int] = None,
    ):
        self.rule_engine = rule_engine or rule_engine_service
        self.summarizer = summarizer or LogSummarizerService()
        self.max_concurrency = (
            max_concurrency or settings.BATCH_MAX_CONCURRENCY or os.cpu_count() or 1
        )

    def plan(self, file_sets: Iterable[FileSet]) -> List[DocumentJob]:
        """Select which documents run against which standards."""
        jobs: List[DocumentJob] = []
        for file_set in file_sets:
            if file_set.details_file:
                jobs.append(
                    DocumentJob(
                        file_set_id=file_set.id,
                        document=file_set.details_file,
                        standards=[get_standard(i) for i in DETAILS_STANDARD_IDS],
                        auxiliary_document=(
                            file_set.netstat_file.content
                            if file_set.netstat_file
                            else None
                        ),
                    )
                )
            if file_set.xml_file:
                jobs.append(
                    DocumentJob(
                        file_set_id=file_set.id,
                        document=file_set.xml_file,
                        standards=[get_standard(i) for i in XML_STANDARD_IDS],
                    )
                )
        return jobs

    async def run(
        self, file_sets: Iterable[FileSet], batch_id: Optional[str] = None
    ) -> BatchResult:
        """
        Evaluate all file-sets and merge the reports.

        Args:
            file_sets: File-sets from ingestion
            batch_id: Optional id for log correlation (generated if omitted)

        Returns:
            BatchResult keyed by document relative path, then standard id
        """
        batch_id = batch_id or str(uuid.uuid4())
        with batch_scope(batch_id):
            jobs = self.plan(file_sets)
            total = len(jobs)
            logger.info(
                f"Batch {batch_id}: {total} documents, concurrency {self.max_concurrency}"
            )

            semaphore = asyncio.Semaphore(self.max_concurrency)
            finished = 0

            async def run_document(job: DocumentJob) -> List[StandardReport]:
                nonlocal finished
                reports = await asyncio.gather(
                    *(
                        self._run_standard(semaphore, job, standard)
                        for standard in job.standards
                    )
                )
                finished += 1
                logger.info(
                    f"Analyzed {finished}/{total} documents "
                    f"({job.document.relative_path}, set {job.file_set_id})"
                )
                return list(reports)

            per_document = await asyncio.gather(*(run_document(job) for job in jobs))

        result = BatchResult(batch_id=batch_id)
        for job, reports in zip(jobs, per_document):
            key = job.document.relative_path
            result.documents[key] = DocumentInfo(
                name=job.document.name,
                relative_path=key,
                file_set_id=job.file_set_id,
                hashes=job.document.hashes,
            )
            result.results[key] = {report.standard_id: report for report in reports}

        logger.info(f"Batch {batch_id} complete: {result.summary_counts()}")
        return result

    async def _run_standard(
        self, semaphore: asyncio.Semaphore, job: DocumentJob, standard: Standard
    ) -> StandardReport:
        report = StandardReport(
            document=job.document.relative_path,
            file_set_id=job.file_set_id,
            standard_id=standard.id,
        )
        async with semaphore:
            with document_scope(job.document.relative_path, standard.id):
                if standard.kind == StandardKind.SUMMARY:
                    report.summary = await self.summarizer.summarize(
                        job.document.content
                    )
                else:
                    report.outcomes = await asyncio.to_thread(
                        self.rule_engine.evaluate_standard,
                        standard,
                        job.document.content,
                        job.auxiliary_document,
                    )
        return report
