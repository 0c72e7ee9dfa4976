"""Command-line interface."""

from hookbox.cli.app import app

__all__ = ["app"]
