from flask_cors import CORS


def setup_cors(app):
    origins = app.config.get("CORS_ORIGINS", "*")
    if origins != "*":
        origins = [origin.strip() for origin in origins.split(",") if origin.strip()]

    CORS(
        app,
        resources={r"/*": {"origins": origins}},
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
