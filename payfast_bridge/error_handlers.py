import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from .errors import AppError, ConfigurationError

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /",
    "POST /api/payfastNotify",
    "GET /api/payfastSuccess",
    "GET /api/payfastFailure",
]


def request_context():
    """Headers and body of the current request, for diagnostics."""
    return {
        "method": request.method,
        "path": request.path,
        "headers": dict(request.headers),
        "body": request.get_data(as_text=True),
    }


def register_error_handlers(app):
    """Register all error handlers for the application"""

    @app.errorhandler(AppError)
    def handle_app_error(error):
        level = logging.ERROR if error.status_code >= 500 else logging.WARNING
        logger.log(
            level,
            f"{error.__class__.__name__}: {error.message}",
            extra={"payload": error.payload, "request": request_context()},
        )

        body = {"error": error.message, "path": request.path}
        # Never echo configuration details back to the gateway
        if not isinstance(error, ConfigurationError):
            body.update(error.payload)
        return jsonify(body), error.status_code

    @app.errorhandler(404)
    def not_found(e):
        logger.info(f"Not found: {request.path}")
        return jsonify({
            "error": "Not Found",
            "path": request.path,
            "availableEndpoints": AVAILABLE_ENDPOINTS,
        }), 404

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """
        Handles known HTTP errors (400, 405, 415, etc.)
        """
        logger.warning(f"{e.name}: {e.description} - Path: {request.path}")
        return jsonify({
            "error": e.name,
            "message": e.description,
            "path": request.path,
        }), e.code

    @app.errorhandler(Exception)
    def handle_exception(e):
        """
        Handles all unexpected server errors
        """
        logger.exception("Error processing request", extra={"request": request_context()})
        return jsonify({
            "error": "Internal server error",
            "message": str(e),
        }), 500
