"""HTTP handlers for the repair intake API."""

from .api_handler import app

__all__ = ["app"]
