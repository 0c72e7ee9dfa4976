"""Single-request rewrite command."""

import json
from pathlib import Path
from typing import Annotated

import typer

from hookbox.cli.console import load_cli_config


def register(app: typer.Typer) -> None:
    """Register the rewrite command."""

    @app.command()
    def rewrite(
        url: Annotated[
            str,
            typer.Argument(help="Intercepted request URL"),
        ],
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
    ) -> None:
        """Run the video rewrite handler for one request URL.

        Prints the host response as JSON: a redirect payload on a cache hit,
        an empty object when the request should pass through.

        Examples:
            hookbox rewrite "https://cdn.example.com/videos/abc123/00000/src.mp4"
            hookbox rewrite "https://cdn.example.com/play?id=abc123"
        """
        import asyncio

        from hookbox.host import create_host
        from hookbox.video import VideoRewriter

        config = load_cli_config(config_path)
        host = create_host(config)
        rewriter = VideoRewriter(
            host,
            settings=config.video_cache,
            timezone=config.timezone,
        )

        async def run() -> dict:
            try:
                result = await rewriter.handle(url)
            finally:
                await host.close()
            return result.to_response()

        response = asyncio.run(run())
        typer.echo(json.dumps(response, ensure_ascii=False))
