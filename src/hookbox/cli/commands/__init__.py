"""CLI command modules."""

from hookbox.cli.commands import cache, config, cron, rewrite, serve

__all__ = [
    "cache",
    "config",
    "cron",
    "rewrite",
    "serve",
]
