"""
Lookup and loading of compliance standards.
"""

import logging
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from logaudit.rule_engine.exceptions import (
    StandardDefinitionError,
    StandardNotFoundError,
)
from logaudit.rule_engine.schemas import Standard

from .catalog import AVAILABLE_STANDARDS

logger = logging.getLogger(__name__)

_STANDARDS_BY_ID: Dict[str, Standard] = {s.id: s for s in AVAILABLE_STANDARDS}


def list_standards() -> List[Standard]:
    """All built-in standards in catalog order."""
    return list(AVAILABLE_STANDARDS)


def get_standard(standard_id: str) -> Standard:
    """
    Get a built-in standard by id.

    Raises:
        StandardNotFoundError: if no standard has this id.
    """
    standard = _STANDARDS_BY_ID.get(standard_id)
    if standard is None:
        raise StandardNotFoundError(standard_id)
    return standard


def load_standard(data: Mapping[str, Any]) -> Standard:
    """
    Build a standard from plain data (e.g. parsed JSON or YAML).

    Patterns are given as strings; use inline flags such as ``(?i)`` for
    case-insensitive matching.

    Raises:
        StandardDefinitionError: if any rule or pattern is malformed.
    """
    standard_id = data.get("id") if isinstance(data, Mapping) else None
    try:
        standard = Standard.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Rejected standard definition {standard_id!r}: {e}")
        raise StandardDefinitionError(str(e), standard_id=standard_id) from e

    logger.info(f"Loaded standard '{standard.id}' with {len(standard.rules)} rules")
    return standard
