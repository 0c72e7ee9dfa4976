"""Cron plugin commands."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import click
import typer

from hookbox.cli.console import (
    console,
    error,
    load_cli_config,
    log_level_option,
    success,
    warning,
)


def _format_countdown(next_fire: datetime | None) -> str:
    """Format a countdown string for the next fire time."""
    if next_fire is None:
        return "[dim]?[/dim]"

    now = datetime.now(UTC)
    if next_fire <= now:
        return "[green]now[/green]"

    total_seconds = int((next_fire - now).total_seconds())
    if total_seconds < 60:
        return f"in {total_seconds}s"

    total_minutes = total_seconds // 60
    if total_minutes < 60:
        return f"in {total_minutes}m"

    hours = total_minutes // 60
    minutes = total_minutes % 60
    if hours < 24:
        if minutes:
            return f"in {hours}h {minutes}m"
        return f"in {hours}h"

    days = hours // 24
    hours = hours % 24
    if hours:
        return f"in {days}d {hours}h"
    return f"in {days}d"


def register(app: typer.Typer) -> None:
    """Register the cron command."""

    @app.command()
    def cron(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: check, run"),
        ] = None,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        dry_run: Annotated[
            bool,
            typer.Option(
                "--dry-run",
                help="Log job dispatches instead of sending them",
            ),
        ] = False,
    ) -> None:
        """Validate or run the configured cron jobs.

        Jobs come from the [cron] section of the config file.

        Examples:
            hookbox cron check           # Validate rules, show next fire times
            hookbox cron run             # Run the scheduler in the foreground
            hookbox cron run --dry-run   # Same, but only log dispatches
        """
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        config = load_cli_config(config_path)

        if action == "check":
            _cron_check(config)

        elif action == "run":
            _cron_run(config, dry_run)

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: check, run")
            raise typer.Exit(1)


def _cron_check(config) -> None:
    """Validate every configured job and show when it fires next."""
    from zoneinfo import ZoneInfo

    from rich.table import Table

    from hookbox.cron.scheduler import is_valid_cron, next_fire_time

    cron_config = config.cron
    if cron_config is None:
        warning("No [cron] section configured")
        return

    rows = []
    for category in ("maskmsg", "admin", "adminpush", "userpush"):
        for job in getattr(cron_config, category):
            rows.append((category, job.enable, job.rule))

    if not rows:
        warning("No cron jobs configured")
        return

    now = datetime.now(UTC).astimezone(ZoneInfo(config.timezone))
    table = Table(show_header=True)
    table.add_column("Category")
    table.add_column("Name")
    table.add_column("Cron")
    table.add_column("Enabled")
    table.add_column("Next Fire")

    invalid = 0
    for category, enabled, rule in rows:
        valid = is_valid_cron(rule.cron)
        if enabled and not valid:
            invalid += 1
        name = rule.display_name
        if len(name) > 30:
            name = name[:30] + "..."
        next_fire = (
            _format_countdown(next_fire_time(rule.cron, now).astimezone(UTC))
            if valid
            else "[red]invalid[/red]"
        )
        table.add_row(
            category,
            name or "[dim]unnamed[/dim]",
            rule.cron,
            "yes" if enabled else "[dim]no[/dim]",
            next_fire,
        )

    console.print(table)
    if not cron_config.basic.enable:
        warning("Plugin is disabled ([cron.basic] enable = false)")
    if invalid:
        error(f"{invalid} enabled job(s) have an invalid cron expression")
        raise typer.Exit(1)
    success(f"{len(rows)} job(s) checked")


def _cron_run(config, dry_run: bool) -> None:
    """Run the scheduler until interrupted."""
    import asyncio
    import signal

    from hookbox.cron.runtime import create_cron_runtime
    from hookbox.logging import configure_logging

    configure_logging(level=log_level_option(), use_rich=True, log_to_file=True)
    runtime = create_cron_runtime(config, dry_run=dry_run)

    async def run() -> None:
        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, stop_event.set)

        await runtime.scheduler.start()
        console.print(
            f"[bold green]Cron scheduler running "
            f"({len(runtime.scheduler.list_jobs())} job(s), tz={config.timezone})"
            f"[/bold green]"
        )
        try:
            await stop_event.wait()
        finally:
            await runtime.scheduler.stop()
            await runtime.close()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass
    console.print("\n[bold yellow]Cron scheduler stopped[/bold yellow]")
