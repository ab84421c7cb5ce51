"""
Identa API package.

Provides the FastAPI application for the customer identity and billing service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
