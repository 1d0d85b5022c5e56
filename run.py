import atexit
import os

from dotenv import load_dotenv

load_dotenv()

from payfast_bridge import create_app  # noqa: E402


app = create_app(os.getenv("APP_ENV", "development"))
atexit.register(app.extensions["reconciler"].close)


if __name__ == "__main__":
    port = app.config.get("PORT", 3000)
    app.logger.info(f"Server running on port {port}")
    app.run(
        host="0.0.0.0",
        port=port,
        debug=app.config.get("DEBUG", False),
        use_reloader=False,
    )
