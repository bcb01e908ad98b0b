"""FastAPI web application for linkdash."""

from .app_factory import create_app

__all__ = ["create_app"]
