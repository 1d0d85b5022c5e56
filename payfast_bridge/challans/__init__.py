from .identifiers import parse_record_key
from .reconciler import (
    FALLBACK,
    NOT_FOUND,
    PAYMENT_FAILED,
    PRIMARY,
    SUCCESS_CODES,
    UPDATED,
    ReconcileOutcome,
    Reconciler,
    is_success_code,
)

__all__ = [
    "FALLBACK",
    "NOT_FOUND",
    "PAYMENT_FAILED",
    "PRIMARY",
    "SUCCESS_CODES",
    "UPDATED",
    "ReconcileOutcome",
    "Reconciler",
    "is_success_code",
    "parse_record_key",
]
