from dataclasses import dataclass
from typing import Mapping, Optional

from ..errors import MissingFieldError

# Ordered aliases per logical field; PayFast posts either convention.
FIELD_ALIASES = {
    "basket_id": ("basket_id", "BASKET_ID"),
    "err_code": ("err_code", "ERR_CODE", "ERROR_CODE"),
    "err_msg": ("err_msg", "ERR_MSG", "ERROR_MESSAGE"),
    "transaction_id": ("transaction_id", "TRANSACTION_ID"),
    "validation_hash": ("validation_hash", "VALIDATION_HASH"),
    "email_address": ("email_address", "EMAIL_ADDRESS"),
}

DEFAULT_ERROR_CODE = "000"


def resolve_field(data: Mapping, name: str, default=None):
    """
    Return the first non-empty value among the aliases of ``name``.

    Empty strings count as absent, so ``basket_id=""`` falls through to
    ``BASKET_ID`` and finally to ``default``.
    """
    for alias in FIELD_ALIASES[name]:
        value = data.get(alias)
        if value not in (None, ""):
            return value
    return default


@dataclass(frozen=True)
class Notification:
    """An inbound payment notification (IPN). Never persisted."""

    basket_id: Optional[str]
    err_code: str
    transaction_id: Optional[str]
    validation_hash: Optional[str]
    email_address: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping) -> "Notification":
        return cls(
            basket_id=resolve_field(data, "basket_id"),
            err_code=resolve_field(data, "err_code", DEFAULT_ERROR_CODE),
            transaction_id=resolve_field(data, "transaction_id"),
            validation_hash=resolve_field(data, "validation_hash"),
            email_address=resolve_field(data, "email_address", ""),
        )

    def require(self):
        """Raise MissingFieldError unless basket id and validation hash are both present."""
        if not self.basket_id or not self.validation_hash:
            raise MissingFieldError(
                "Missing required fields",
                payload={
                    "received": {
                        "basketId": self.basket_id,
                        "validationHash": self.validation_hash,
                    }
                },
            )
        return self

    def to_log_dict(self) -> dict:
        return {
            "basket_id": self.basket_id,
            "err_code": self.err_code,
            "transaction_id": self.transaction_id,
            "email_address": self.email_address,
            "validation_hash": self.validation_hash,
        }
