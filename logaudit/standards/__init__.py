"""
Compliance standards: the built-in catalog and loading of custom definitions.
"""

from .catalog import (
    AI_STANDARD_ID,
    AVAILABLE_STANDARDS,
    BITTORRENT_STANDARD_ID,
    DETAILS_STANDARD_IDS,
    GENERAL_STANDARD_ID,
    SECURITY_STANDARD_ID,
    XML_STANDARD_IDS,
    XML_TDR_STANDARD_ID,
)
from .service import get_standard, list_standards, load_standard

__all__ = [
    "AVAILABLE_STANDARDS",
    "AI_STANDARD_ID",
    "BITTORRENT_STANDARD_ID",
    "GENERAL_STANDARD_ID",
    "SECURITY_STANDARD_ID",
    "XML_TDR_STANDARD_ID",
    "DETAILS_STANDARD_IDS",
    "XML_STANDARD_IDS",
    "get_standard",
    "list_standards",
    "load_standard",
]
