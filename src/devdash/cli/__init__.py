"""Command line interface for devdash."""

from .main import app

__all__ = ["app"]
