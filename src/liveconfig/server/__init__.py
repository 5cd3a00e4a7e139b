"""liveconfig HTTP server.

FastAPI-based HTTP interface serving the single live configuration record.
"""

from .app import create_app, run_server

__all__ = ["create_app", "run_server"]
