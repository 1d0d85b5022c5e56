from .base import BaseConfig


class TestingConfig(BaseConfig):
    """
    Testing configuration. Never reads gateway or Firebase secrets from the environment.
    """

    TESTING = True
    ENVIRONMENT = "testing"

    PAYFAST_SECURED_KEY = "test-secured-key"
    PAYFAST_MERCHANT_ID = "102"

    FIREBASE_PROJECT_ID = None
    FIREBASE_CLIENT_EMAIL = None
    FIREBASE_PRIVATE_KEY = None
    FIREBASE_DATABASE_URL = None

    STORE_BACKEND = "realtime"
    FALLBACK_WRITE_MODE = "await"
    STRICT_CONFIG = False
