"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from hookbox.cli.console import console, error, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate, paths"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: $HOOKBOX_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Manage configuration."""
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from pydantic import ValidationError
        from rich.syntax import Syntax
        from rich.table import Table

        from hookbox.config import load_config
        from hookbox.config.paths import get_all_paths, get_config_path

        expanded_path = path.expanduser() if path else get_config_path()

        if action == "show":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                raise typer.Exit(1)

            content = expanded_path.read_text()
            syntax = Syntax(content, "toml", theme="monokai", line_numbers=True)
            console.print(f"[bold]Config file: {expanded_path}[/bold]\n")
            console.print(syntax)

        elif action == "validate":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                raise typer.Exit(1)

            try:
                config_obj = load_config(expanded_path)
            except ValidationError as e:
                error("Configuration validation failed:")
                console.print()
                for err in e.errors():
                    loc = ".".join(str(x) for x in err["loc"])
                    console.print(f"  [yellow]{loc}[/yellow]: {err['msg']}")
                raise typer.Exit(1) from None
            except Exception as e:
                error(f"Error loading config: {e}")
                raise typer.Exit(1) from None

            table = Table(title="Configuration Summary")
            table.add_column("Setting", style="cyan")
            table.add_column("Value", style="green")

            table.add_row("Timezone", config_obj.timezone)
            store = f"{config_obj.host.store} ({config_obj.host.store_path})"
            table.add_row("Store", store)
            table.add_row("Notifier", config_obj.host.notifier)
            table.add_row("Cache size", str(config_obj.video_cache.max_entries))
            table.add_row("Master marker", config_obj.video_cache.master_marker)
            if config_obj.cron is None:
                table.add_row("Cron plugin", "[dim]not configured[/dim]")
            else:
                cron = config_obj.cron
                total = (
                    len(cron.maskmsg)
                    + len(cron.admin)
                    + len(cron.adminpush)
                    + len(cron.userpush)
                )
                state = "enabled" if cron.basic.enable else "disabled"
                table.add_row("Cron plugin", f"{state}, {total} job(s)")
            table.add_row(
                "Telegram",
                "configured"
                if config_obj.telegram_token
                else "[dim]not configured[/dim]",
            )
            table.add_row(
                "Server", f"{config_obj.server.host}:{config_obj.server.port}"
            )

            success("Configuration is valid!")
            console.print()
            console.print(table)

        elif action == "paths":
            table = Table(show_header=True)
            table.add_column("Name", style="cyan")
            table.add_column("Path")
            for name, value in get_all_paths().items():
                table.add_row(name, str(value))
            console.print(table)

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, validate, paths")
            raise typer.Exit(1)
