"""
Configuration validation.

Missing gateway secrets are a per-request ConfigurationError by default; with
STRICT_CONFIG they stop the application from starting instead.
"""

import logging

from .errors import ConfigurationError
from .storage import BACKENDS

logger = logging.getLogger(__name__)

GATEWAY_VARS = ("PAYFAST_SECURED_KEY", "PAYFAST_MERCHANT_ID")
FALLBACK_WRITE_MODES = ("await", "background")


def validate_configuration(app) -> bool:
    """Log every problem found, return False if any, raise for strict or unusable settings."""
    config = app.config
    problems = []

    missing = [name for name in GATEWAY_VARS if not config.get(name)]
    if missing:
        if config.get("STRICT_CONFIG"):
            raise ConfigurationError("Missing PayFast configuration", payload={"missing": missing})
        logger.warning("PayFast secrets not set, notifications will be answered with 500",
                       extra={"missing": missing})
        problems.extend(missing)

    backend = (config.get("STORE_BACKEND") or "").lower()
    if backend not in BACKENDS:
        raise ConfigurationError(f"Invalid STORE_BACKEND value: {backend}",
                                 payload={"supported": list(BACKENDS)})

    mode = (config.get("FALLBACK_WRITE_MODE") or "").lower()
    if mode not in FALLBACK_WRITE_MODES:
        raise ConfigurationError(f"Invalid FALLBACK_WRITE_MODE value: {mode}",
                                 payload={"supported": list(FALLBACK_WRITE_MODES)})
    if mode == "background":
        logger.warning("Fallback challan updates are not awaited; responses may precede the write")

    if problems:
        logger.warning("Configuration validation finished with problems", extra={"problems": problems})
    else:
        logger.info("Configuration validated")
    return not problems
