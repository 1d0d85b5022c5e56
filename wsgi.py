import atexit
import os
from dotenv import load_dotenv

load_dotenv()

from payfast_bridge import create_app  # noqa: E402

config = os.getenv("APP_ENV", "production")

app = create_app(config)
atexit.register(app.extensions["reconciler"].close)
