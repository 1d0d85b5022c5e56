"""
Firebase Admin initialization.

The Firebase app is created once by the application factory and handed to the
storage backend. Nothing in the request path initializes Firebase lazily.
"""

import logging

import firebase_admin
from firebase_admin import credentials

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "payfast-bridge"


def firebase_options(config):
    project_id = config.get("FIREBASE_PROJECT_ID")
    database_url = config.get("FIREBASE_DATABASE_URL")
    if not database_url and project_id:
        database_url = f"https://{project_id}-default-rtdb.firebaseio.com"
    return {"databaseURL": database_url} if database_url else {}


def firebase_credentials(config):
    project_id = config.get("FIREBASE_PROJECT_ID")
    client_email = config.get("FIREBASE_CLIENT_EMAIL")
    private_key = config.get("FIREBASE_PRIVATE_KEY")

    missing = [
        name for name, value in (
            ("FIREBASE_PROJECT_ID", project_id),
            ("FIREBASE_CLIENT_EMAIL", client_email),
            ("FIREBASE_PRIVATE_KEY", private_key),
        ) if not value
    ]
    if missing:
        raise ConfigurationError("Missing Firebase credentials", payload={"missing": missing})

    return credentials.Certificate({
        "type": "service_account",
        "project_id": project_id,
        "client_email": client_email,
        # Env files usually carry the PEM with escaped newlines
        "private_key": private_key.replace("\\n", "\n"),
        "token_uri": "https://oauth2.googleapis.com/token",
    })


def init_firebase(config):
    """Return the named Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        pass

    firebase_app = firebase_admin.initialize_app(
        firebase_credentials(config),
        firebase_options(config),
        name=FIREBASE_APP_NAME,
    )
    logger.info("Firebase Admin initialized", extra={"project_id": config.get("FIREBASE_PROJECT_ID")})
    return firebase_app
