from .schemas import BatchResult, DocumentInfo, StandardReport
from .service import BatchCoordinator, DocumentJob

__all__ = [
    "BatchCoordinator",
    "DocumentJob",
    "BatchResult",
    "DocumentInfo",
    "StandardReport",
]
