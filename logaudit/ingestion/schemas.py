"""
Schemas for ingested files and file-sets.
"""

from typing import Optional

from pydantic import BaseModel


class FileHashes(BaseModel):
    """Hex digests shown next to each file for integrity checks."""

    md5: str
    sha1: str
    sha256: str


class LoadedFile(BaseModel):
    name: str
    relative_path: str  # unique within one batch, used as the document key
    content: str
    hashes: FileHashes


class FileSet(BaseModel):
    """Related documents from one folder, analyzed as a unit."""

    id: str  # folder path relative to the ingestion root, or "root"
    details_file: Optional[LoadedFile] = None  # primary client log
    xml_file: Optional[LoadedFile] = None  # structured TDR report
    netstat_file: Optional[LoadedFile] = None  # auxiliary connection-state dump
