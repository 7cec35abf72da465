from .hashing import calculate_hashes
from .schemas import FileHashes, FileSet, LoadedFile
from .service import (
    DETAILS_FILE_NAME,
    NETSTAT_FILE_NAME,
    ROOT_FILE_SET_ID,
    XML_FILE_NAME,
    build_file_set,
    build_loaded_file,
    collect_file_sets,
    load_file,
)

__all__ = [
    "calculate_hashes",
    "FileHashes",
    "FileSet",
    "LoadedFile",
    "DETAILS_FILE_NAME",
    "NETSTAT_FILE_NAME",
    "XML_FILE_NAME",
    "ROOT_FILE_SET_ID",
    "build_file_set",
    "build_loaded_file",
    "collect_file_sets",
    "load_file",
]
