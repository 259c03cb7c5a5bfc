"""HTTP boundary for server export."""

from quire.api.app import app, create_app

__all__ = ["app", "create_app"]
