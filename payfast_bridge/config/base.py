import os

from ..errors import ConfigurationError


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name, default):
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


class BaseConfig:
    """
    Base configuration shared by all environments.
    """

    # Flask
    DEBUG = False
    TESTING = False
    ENVIRONMENT = "base"
    JSON_SORT_KEYS = False

    # Application
    APP_NAME = "PayFast Backend API"
    PORT = int(os.getenv("PORT", "3000"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_REQUESTS = _env_bool("LOG_REQUESTS")

    # PayFast
    PAYFAST_SECURED_KEY = os.getenv("PAYFAST_SECURED_KEY")
    PAYFAST_MERCHANT_ID = os.getenv("PAYFAST_MERCHANT_ID")
    PAYMENT_METHOD = os.getenv("PAYMENT_METHOD", "PayFast")
    DEEP_LINK_SCHEME = os.getenv("DEEP_LINK_SCHEME", "echallan")

    # Firebase
    FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
    FIREBASE_CLIENT_EMAIL = os.getenv("FIREBASE_CLIENT_EMAIL")
    FIREBASE_PRIVATE_KEY = os.getenv("FIREBASE_PRIVATE_KEY")
    FIREBASE_DATABASE_URL = os.getenv("FIREBASE_DATABASE_URL")

    # Storage
    STORE_BACKEND = os.getenv("STORE_BACKEND", "realtime")
    STORE_ROOT = os.getenv("STORE_ROOT", "challans_metadata")
    FIRESTORE_COLLECTION = os.getenv("FIRESTORE_COLLECTION", "challans")
    RECORD_KEY_FIELDS = _env_list("RECORD_KEY_FIELDS", ["challan_number", "challanNumber"])

    # "await" blocks the response on the fallback write, "background" does not
    FALLBACK_WRITE_MODE = os.getenv("FALLBACK_WRITE_MODE", "await")

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Fail at startup instead of per request when gateway secrets are missing
    STRICT_CONFIG = _env_bool("STRICT_CONFIG")
