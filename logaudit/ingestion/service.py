"""
Ingestion: groups the files of an export directory into file-sets.

The rule engine never opens files itself; everything it reads comes through
here (or through the HTTP host, which builds file-sets from request bodies).
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from .hashing import calculate_hashes
from .schemas import FileSet, LoadedFile

logger = logging.getLogger(__name__)

DETAILS_FILE_NAME = "details.txt"
XML_FILE_NAME = "downloadstatus.xml"
NETSTAT_FILE_NAME = "netstat.txt"

ROOT_FILE_SET_ID = "root"

# Lower-cased file name -> FileSet attribute
_SLOT_BY_FILE_NAME = {
    DETAILS_FILE_NAME: "details_file",
    XML_FILE_NAME: "xml_file",
    NETSTAT_FILE_NAME: "netstat_file",
}


def build_loaded_file(name: str, content: str, relative_path: str) -> LoadedFile:
    """LoadedFile from in-memory text; hashes are taken over its UTF-8 bytes."""
    return LoadedFile(
        name=name,
        relative_path=relative_path,
        content=content,
        hashes=calculate_hashes(content.encode("utf-8")),
    )


def load_file(path: Path, relative_path: str) -> LoadedFile:
    """Read a file once, hash the raw bytes and decode them as UTF-8."""
    data = path.read_bytes()
    return LoadedFile(
        name=path.name,
        relative_path=relative_path,
        content=data.decode("utf-8", errors="replace"),
        hashes=calculate_hashes(data),
    )


def build_file_set(
    file_set_id: str,
    details: Optional[Tuple[str, str]] = None,
    xml: Optional[Tuple[str, str]] = None,
    netstat: Optional[Tuple[str, str]] = None,
) -> FileSet:
    """
    Build a file-set from (name, content) pairs held in memory.

    Relative paths are "<file_set_id>/<name>" so documents from different
    file-sets never share a key.
    """

    def _file(entry: Optional[Tuple[str, str]]) -> Optional[LoadedFile]:
        if entry is None:
            return None
        name, content = entry
        return build_loaded_file(name, content, f"{file_set_id}/{name}")

    return FileSet(
        id=file_set_id,
        details_file=_file(details),
        xml_file=_file(xml),
        netstat_file=_file(netstat),
    )


def collect_file_sets(root: Path) -> Dict[str, FileSet]:
    """
    Walk root recursively and group the relevant files by folder.

    Only details.txt, downloadstatus.xml and netstat.txt are kept (matched
    case-insensitively). Files directly under root form the "root" file-set.

    Raises:
        NotADirectoryError: if root is not a directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise NotADirectoryError(f"{root} is not a directory")

    file_sets: Dict[str, FileSet] = {}
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        slot = _SLOT_BY_FILE_NAME.get(path.name.lower())
        if slot is None:
            continue

        relative = path.relative_to(root)
        folder = relative.parent.as_posix()
        file_set_id = folder if folder != "." else ROOT_FILE_SET_ID

        file_set = file_sets.setdefault(file_set_id, FileSet(id=file_set_id))
        if getattr(file_set, slot) is not None:
            logger.warning(
                f"File-set '{file_set_id}' has more than one {path.name.lower()}; "
                f"using {relative.as_posix()}"
            )
        setattr(file_set, slot, load_file(path, relative.as_posix()))

    logger.info(f"Collected {len(file_sets)} file-sets from {root}")
    return dict(sorted(file_sets.items()))
