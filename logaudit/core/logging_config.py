"""
Loguru setup for the compliance service.

Every record is written to stderr as one JSON object. Records carry the
correlation context they were emitted under: the HTTP request, the batch
run, and the (document, standard) pair being checked.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator

from loguru import logger

from logaudit.core.config import settings

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
batch_id_var: ContextVar[str] = ContextVar("batch_id", default="-")

# Extra keys promoted into the "context" block of a JSON record, in output order
CONTEXT_FIELDS = ("request_id", "batch_id", "document", "standard_id")


class InterceptHandler(logging.Handler):
    """Forwards stdlib logging records (ours, uvicorn's, httpx's) to loguru."""

    def emit(self, record: logging.LogRecord):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so loguru reports the real caller
        frame = sys._getframe(settings.LOGGING_FRAME_DEPTH)
        depth = settings.LOGGING_FRAME_DEPTH
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def context_filter(record):
    """Copy the active request and batch ids into the record's extras."""
    for name, var in (("request_id", request_id_var), ("batch_id", batch_id_var)):
        value = var.get()
        if value != "-":
            record["extra"][name] = value
    return record


def build_json_record(record) -> Dict[str, Any]:
    """
    Shape a loguru record for the JSON sink.

    Context keys that are not set are left out rather than written as null.
    An exception is reduced to "Type: message"; loguru's own formatting is
    not used here.
    """
    log_record: Dict[str, Any] = {
        "time": record["time"].isoformat(timespec="milliseconds"),
        "level": record["level"].name,
        "logger": record["name"],
        "message": record["message"],
    }

    context = {
        field: record["extra"][field]
        for field in CONTEXT_FIELDS
        if field in record["extra"]
    }
    if context:
        log_record["context"] = context

    exception = record["exception"]
    if exception and exception.type:
        log_record["error"] = f"{exception.type.__name__}: {exception.value}"

    return log_record


def json_sink(message):
    sys.stderr.write(json.dumps(build_json_record(message.record)) + "\n")


def configure_logging():
    """Route all logging through loguru's JSON sink at settings.LOG_LEVEL."""
    logger.remove()
    logger.add(json_sink, level=settings.LOG_LEVEL, filter=context_filter)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.info(f"Logging configured at level {settings.LOG_LEVEL}")


@contextmanager
def request_scope(request_id: str) -> Iterator[None]:
    """Tag every record emitted inside the block with request_id."""
    token = request_id_var.set(request_id)
    try:
        yield
    finally:
        request_id_var.reset(token)


@contextmanager
def batch_scope(batch_id: str) -> Iterator[None]:
    """Tag every record emitted inside the block with batch_id."""
    token = batch_id_var.set(batch_id)
    try:
        yield
    finally:
        batch_id_var.reset(token)


def document_scope(document: str, standard_id: str):
    """Tag records with the (document, standard) pair being evaluated."""
    return logger.contextualize(document=document, standard_id=standard_id)
