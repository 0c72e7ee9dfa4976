"""HTTP server for hookbox."""

from hookbox.server.app import HookboxServer, create_app

__all__ = [
    "HookboxServer",
    "create_app",
]
