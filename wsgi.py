"""
WSGI entry point for the catalog API in production.

Serve it with Gunicorn (``gunicorn wsgi:app``). The environment is pinned
to production so that JSON log rendering and mandatory audit logging are
active whatever ``FLASK_ENV`` the container was started with.
"""

import os

# Must precede the app import: logging is configured when app.logger loads
os.environ["FLASK_ENV"] = "production"

from app import create_app  # noqa: E402
from app.logger import configure_logging  # noqa: E402

# Re-apply in case app.logger was imported before this module
configure_logging()

app = create_app("app.config.ProductionConfig")

if __name__ == "__main__":
    app.run()
