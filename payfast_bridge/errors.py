"""
Application errors.

Every error carries the HTTP status it maps to and an optional payload that is
merged into the JSON body by the error handler.
"""


class AppError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}


class MissingFieldError(AppError):
    status_code = 400


class ConfigurationError(AppError):
    """Gateway secrets or storage settings are missing or invalid."""

    status_code = 500


class InvalidSignatureError(AppError):
    status_code = 400


class InvalidIdentifierError(AppError):
    status_code = 400


class RecordNotFoundError(AppError):
    status_code = 404


class TransientStoreError(AppError):
    """The document store failed or was unreachable. Not the same as a missing record."""

    status_code = 500

    def __init__(self, message, payload=None):
        super().__init__(message, payload={"message": message, **(payload or {})})
