"""Main CLI application."""

from typing import Annotated

import typer

from hookbox.cli.commands import cache, config, cron, rewrite, serve

app = typer.Typer(
    name="hookbox",
    help="hookbox - video URL cache and cron job plugin",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log at DEBUG level",
        ),
    ] = False,
) -> None:
    """Configure logging before any command runs."""
    import os

    from hookbox.logging import configure_logging

    ctx.obj = {"verbose": verbose}
    # Commands print their own results; keep routine INFO logs out of the way
    level = "DEBUG" if verbose else os.environ.get("HOOKBOX_LOG_LEVEL", "WARNING")
    configure_logging(level=level)


for command in (cache, config, cron, rewrite, serve):
    command.register(app)


if __name__ == "__main__":
    app()
