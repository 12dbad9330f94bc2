"""Command line interface."""

from favicon_api.cli.app import app, main

__all__ = ["app", "main"]
