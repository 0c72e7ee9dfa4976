"""Shared console utilities for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click
import typer
from rich.console import Console

if TYPE_CHECKING:
    from hookbox.config.models import HookboxConfig


# Shared console instance for all CLI commands
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{msg}[/red]")


def warning(msg: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]{msg}[/yellow]")


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{msg}[/green]")


def log_level_option() -> str | None:
    """DEBUG when the global --verbose flag is set, otherwise None."""
    ctx = click.get_current_context(silent=True)
    settings = ctx.find_root().obj if ctx else None
    if settings and settings.get("verbose"):
        return "DEBUG"
    return None


def load_cli_config(path: Path | None) -> HookboxConfig:
    """Load config for a command, exiting with a readable error on failure.

    Without an explicit path the defaults apply when no config file exists.
    """
    from pydantic import ValidationError

    from hookbox.config import load_config_or_default

    try:
        return load_config_or_default(path)
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1) from None
    except ValidationError as e:
        error("Configuration validation failed:")
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            console.print(f"  [yellow]{loc}[/yellow]: {err['msg']}")
        raise typer.Exit(1) from None
    except ValueError as e:
        error(f"Error loading config: {e}")
        raise typer.Exit(1) from None
