"""Command line interface entry points for pricehist."""

from .main import app, create_app, main

__all__ = ["app", "create_app", "main"]
