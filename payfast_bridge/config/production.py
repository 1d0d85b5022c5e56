from .base import BaseConfig, _env_bool


class ProductionConfig(BaseConfig):
    """
    Production configuration.
    """

    DEBUG = False
    ENVIRONMENT = "production"

    # Gateway secrets MUST be set via environment variables in production
    STRICT_CONFIG = _env_bool("STRICT_CONFIG", default=True)
