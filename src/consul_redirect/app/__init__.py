"""Consul redirect FastAPI application."""

from .main import create_app
from .settings import RedirectSettings

__all__ = ["create_app", "RedirectSettings"]
