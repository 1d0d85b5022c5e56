"""
Flask application factory for the PayFast notification bridge.

The factory owns the lifecycle of the Firebase app, the record store and the
reconciler; request handlers only look them up in ``app.extensions``.
"""

import logging
from typing import Optional

from flask import Flask

from .challans import Reconciler
from .config import get_config
from .config_validator import validate_configuration
from .error_handlers import register_error_handlers
from .health import health_bp
from .logging_config import setup_logging
from .middleware.request_id import init_request_id_middleware
from .middleware.setup import setup_cors
from .routes import payfast_bp
from .storage import RecordStore, build_store

logger = logging.getLogger(__name__)


def create_store(app: Flask) -> RecordStore:
    from .extensions import init_firebase

    firebase_app = init_firebase(app.config)
    return build_store(app.config, firebase_app)


def create_app(config_name: Optional[str] = None, store: Optional[RecordStore] = None,
               reconciler: Optional[Reconciler] = None) -> Flask:
    """
    Build the application.

    Args:
        config_name: development, production or testing (defaults to APP_ENV)
        store: record store to use instead of the configured Firebase backend
        reconciler: reconciler to use instead of one built around ``store``

    Raises:
        ConfigurationError: if the configuration cannot be used
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    setup_logging(app)
    logger.info("Starting application", extra={"environment": app.config.get("ENVIRONMENT")})

    validate_configuration(app)

    if reconciler is None:
        if store is None:
            store = create_store(app)
        reconciler = Reconciler(
            store,
            payment_method=app.config.get("PAYMENT_METHOD", "PayFast"),
            await_fallback_write=app.config.get("FALLBACK_WRITE_MODE", "await").lower() != "background",
        )

    app.extensions["record_store"] = reconciler.store
    app.extensions["reconciler"] = reconciler

    init_request_id_middleware(app)
    setup_cors(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(payfast_bp)

    logger.info("Using store backend", extra={"store": reconciler.store.describe()})
    return app
