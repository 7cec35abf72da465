"""
File integrity digests.
"""

import hashlib

from .schemas import FileHashes


def calculate_hashes(data: bytes) -> FileHashes:
    """MD5, SHA-1 and SHA-256 hex digests of the raw file bytes."""
    return FileHashes(
        md5=hashlib.md5(data).hexdigest(),
        sha1=hashlib.sha1(data).hexdigest(),
        sha256=hashlib.sha256(data).hexdigest(),
    )
