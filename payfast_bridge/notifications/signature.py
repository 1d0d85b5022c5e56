import hashlib
import hmac
from typing import Optional

from ..errors import ConfigurationError


def _require_secrets(shared_secret, merchant_id):
    if not shared_secret or not merchant_id:
        raise ConfigurationError("Server configuration error")


def compute_validation_hash(
    identifier: str,
    status_code: str,
    shared_secret: str,
    merchant_id: str,
) -> str:
    """
    SHA-256 over ``identifier|shared_secret|merchant_id|status_code``.

    Fields are joined with a literal pipe in that fixed order and are not
    escaped. Returns lowercase hex.
    """
    _require_secrets(shared_secret, merchant_id)

    validation_string = f"{identifier}|{shared_secret}|{merchant_id}|{status_code}"
    return hashlib.sha256(validation_string.encode("utf-8")).hexdigest()


def verify(
    identifier: str,
    status_code: str,
    shared_secret: str,
    merchant_id: str,
    supplied_digest: Optional[str],
) -> bool:
    """Check a PayFast validation hash. Letter case of the supplied digest is ignored."""
    computed = compute_validation_hash(identifier, status_code, shared_secret, merchant_id)
    if not supplied_digest:
        return False
    return hmac.compare_digest(computed.encode("ascii"), supplied_digest.lower().encode("utf-8"))
