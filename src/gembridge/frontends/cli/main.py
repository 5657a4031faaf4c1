"""CLI entry point."""

from __future__ import annotations

import asyncio
import json

import rich_click as click

from gembridge.__version__ import __version__

# Configure rich-click styling
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
click.rich_click.ERRORS_EPILOGUE = ""
click.rich_click.MAX_WIDTH = 100


@click.group()
@click.version_option(version=__version__, prog_name="gembridge")
def cli() -> None:
    """gembridge - OpenAI-compatible API gateway for Google Gemini.

    Point any OpenAI client at the gateway and it will be served by Gemini.

    **Commands:**

        gembridge serve     Start the gateway server

        gembridge models    Print the advertised model list
    """
    pass


@cli.command()
@click.option("--host", default=None, help="Host to bind (or GATEWAY_HOST, default 127.0.0.1)")
@click.option("--port", type=int, default=None, help="Port to bind (or GATEWAY_PORT, default 3000)")
@click.option("--api-key", default=None, help="Gemini API key (or GEMINI_API_KEY)")
@click.option("--base-url", default=None, help="Gemini models URL (or GEMINI_BASE_URL)")
@click.option("--static-dir", default=None, help="Serve static assets from this directory")
@click.option("--debug-dir", default=None, help="Save request/response JSON files here")
@click.option(
    "--config", "config_file", default=None, help="YAML config file (or GEMBRIDGE_CONFIG)"
)
@click.option("--log-level", default=None, help="Log level (or GEMBRIDGE_LOG_LEVEL)")
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Log format (or GEMBRIDGE_LOG_FORMAT)",
)
def serve(
    host: str | None,
    port: int | None,
    api_key: str | None,
    base_url: str | None,
    static_dir: str | None,
    debug_dir: str | None,
    config_file: str | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Start the gateway server.

    Settings come from options, then environment variables (a **.env** file
    is loaded), then the YAML config file, then defaults.

    **Examples:**

        gembridge serve

        gembridge serve --port 8080 --static-dir ./public

        GEMINI_API_KEY=AIza... gembridge serve --log-level DEBUG
    """
    from gembridge.compose import create_gateway
    from gembridge.core.logging_config import configure_logging

    configure_logging(level=log_level, format=log_format)  # type: ignore[arg-type]

    try:
        asyncio.run(
            create_gateway(
                host=host,
                port=port,
                api_key=api_key,
                base_url=base_url,
                static_dir=static_dir,
                debug_dir=debug_dir,
                config_file=config_file,
            )
        )
    except KeyboardInterrupt:
        click.echo("Stopped.")


@cli.command()
def models() -> None:
    """Print the models advertised on /v1/models as JSON."""
    from gembridge.gateway.transforms.openai import OpenAITransformer

    click.echo(json.dumps(OpenAITransformer().model_list(), indent=2))


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
