from .fields import FIELD_ALIASES, Notification, resolve_field
from .signature import compute_validation_hash, verify

__all__ = [
    "FIELD_ALIASES",
    "Notification",
    "compute_validation_hash",
    "resolve_field",
    "verify",
]
