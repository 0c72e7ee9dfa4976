"""Server command."""

from pathlib import Path
from typing import Annotated

import typer

from hookbox.cli.console import console, load_cli_config, log_level_option


def register(app: typer.Typer) -> None:
    """Register the serve command."""

    @app.command()
    def serve(
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        host: Annotated[
            str | None,
            typer.Option(
                "--host",
                "-h",
                help="Host to bind to (default: [server] host)",
            ),
        ] = None,
        port: Annotated[
            int | None,
            typer.Option(
                "--port",
                "-p",
                help="Port to bind to (default: [server] port)",
            ),
        ] = None,
        with_cron: Annotated[
            bool,
            typer.Option(
                "--cron/--no-cron",
                help="Run the cron plugin alongside the server",
            ),
        ] = True,
    ) -> None:
        """Start the rewrite HTTP server."""
        import uvicorn

        from hookbox.cron.runtime import create_cron_runtime
        from hookbox.logging import configure_logging
        from hookbox.server import create_app

        configure_logging(level=log_level_option(), use_rich=True, log_to_file=True)
        config = load_cli_config(config_path)

        cron = None
        if with_cron and config.cron is not None:
            cron = create_cron_runtime(config)

        bind_host = host or config.server.host
        bind_port = port or config.server.port
        fastapi_app = create_app(config, cron=cron)

        console.print(
            f"[bold green]Server starting on "
            f"http://{bind_host}:{bind_port}[/bold green]"
        )
        uvicorn.run(
            fastapi_app,
            host=bind_host,
            port=bind_port,
            log_level="info",
            log_config=None,  # Use our logging config, not uvicorn's
        )
