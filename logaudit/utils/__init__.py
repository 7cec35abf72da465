from .data_masker import mask_secrets, redact_for_log

__all__ = ["mask_secrets", "redact_for_log"]
