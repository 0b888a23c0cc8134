"""HTTP API for SheetRelay."""

from .app import create_app

__all__ = ["create_app"]
