"""HTTP API serving collected artifacts to the dashboard."""

from .app import create_app

__all__ = ["create_app"]
