"""Video cache inspection commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from hookbox.cli.console import console, error, load_cli_config, success, warning


def register(app: typer.Typer) -> None:
    """Register the cache command."""

    @app.command()
    def cache(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: list, get, clear"),
        ] = None,
        video_id: Annotated[
            str | None,
            typer.Option(
                "--id",
                "-i",
                help="Video ID for get",
            ),
        ] = None,
        force: Annotated[
            bool,
            typer.Option(
                "--force",
                "-f",
                help="Clear without confirmation",
            ),
        ] = False,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
    ) -> None:
        """Inspect the cached master video URLs.

        Examples:
            hookbox cache list             # Entries, oldest (next evicted) first
            hookbox cache get --id abc123  # Cached URL for one video
            hookbox cache clear --force    # Drop every entry
        """
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from hookbox.host import create_host
        from hookbox.video import VideoUrlCache

        config = load_cli_config(config_path)
        video_cache = VideoUrlCache(
            create_host(config),
            max_entries=config.video_cache.max_entries,
            key=config.video_cache.map_key,
        )

        if action == "list":
            _cache_list(video_cache)

        elif action == "get":
            if video_id is None:
                error("--id is required for get")
                raise typer.Exit(1)
            url = video_cache.lookup(video_id)
            if url is None:
                error(f"No cached URL for video {video_id}")
                raise typer.Exit(1)
            console.print(url, soft_wrap=True)

        elif action == "clear":
            if not force and not typer.confirm("Clear all cached video URLs?"):
                warning("Cancelled")
                raise typer.Exit(0)
            removed = video_cache.clear()
            success(f"Cleared {removed} cached URL(s)")

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: list, get, clear")
            raise typer.Exit(1)


def _cache_list(video_cache) -> None:
    """List cached entries in eviction order."""
    from rich.table import Table

    entries = video_cache.entries()
    if not entries:
        warning("Video cache is empty")
        return

    table = Table(show_header=True)
    table.add_column("#", style="dim")
    table.add_column("Video ID")
    table.add_column("Master URL", overflow="fold")

    for entry in entries:
        table.add_row(str(entry.position), entry.identifier, entry.resolved_url)

    console.print(table)
    console.print(f"\n[dim]Total: {len(entries)}/{video_cache.max_entries}[/dim]")
