"""
version.py
----------

Public ``GET /version`` endpoint returning the contents of the ``VERSION``
file at the repository root.
"""

import os
from flask_restful import Resource


def _read_version():
    version_file_path = os.path.join(
        os.path.dirname(__file__), "..", "..", "VERSION"
    )
    try:
        with open(version_file_path, "r", encoding="utf-8") as f:
            return f.read().strip() or "unknown"
    except (OSError, UnicodeDecodeError):
        return "unknown"


API_VERSION = _read_version()


class VersionResource(Resource):
    """Expose the deployed API version."""

    def get(self):
        return {"version": API_VERSION}, 200
