"""CLI interface for Sitestage.

Serve a localized site live or generate it as static files.
"""

import asyncio
import errno
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

import click

from sitestage.config import Config
from sitestage.generator import DEFAULT_CONCURRENCY


@click.group()
def cli() -> None:
    """Sitestage - serve and generate localized websites."""


_src_argument = click.argument(
    "src",
    required=False,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: SRC/sitestage.toml or auto-discover)",
)

_verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (log every request)",
)


@cli.command()
@_src_argument
@_config_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--cache/--no-cache",
    default=None,
    help="Enable/disable the render cache (overrides config, default: disabled)",
)
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Enable/disable configuration reload (overrides config, default: enabled)",
)
@_verbose_option
def serve(
    src: Path | None,
    config_path: Path | None,
    host: str | None,
    port: int | None,
    cache: bool | None,
    reload: bool | None,
    verbose: bool,
) -> None:
    """Start the site server."""
    from sitestage.server import run_server

    _configure_logging(verbose)

    def load() -> Config:
        return Config.load(config_path, src).with_overrides(
            host=host,
            port=port,
            cache_enabled=cache,
            reload_enabled=reload,
        )

    config = _load_or_exit(load)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Pages directory: {config.dirs.pages_dir}")
    click.echo(f"Public directory: {config.dirs.public_dir}")
    if config.cache.enabled:
        click.echo(f"Cache directory: {config.dirs.content_dir}")
    else:
        click.echo("Cache: disabled")
    if config.reload.enabled:
        click.echo("Configuration reload: enabled")
    else:
        click.echo("Configuration reload: disabled")

    try:
        run_server(config, loader=load)
    except OSError as e:
        if e.errno == errno.EADDRINUSE:
            _fail(f"Port {config.server.port} is in use")
        raise


@cli.command()
@_src_argument
@_config_option
@click.option(
    "--clean/--no-clean",
    default=True,
    help="Remove the content directory before generating (default: enabled)",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=DEFAULT_CONCURRENCY,
    show_default=True,
    help="Maximum number of pages rendered at once",
)
@_verbose_option
def generate(
    src: Path | None,
    config_path: Path | None,
    clean: bool,
    concurrency: int,
    verbose: bool,
) -> None:
    """Generate the static site into the content directory."""
    from sitestage.generator import StaticGenerator

    _configure_logging(verbose)
    config = _load_or_exit(lambda: Config.load(config_path, src))

    click.echo(f"Generating static site into {config.dirs.content_dir}")
    generator = StaticGenerator(config, concurrency=concurrency, clean=clean)
    report = asyncio.run(generator.generate())

    click.echo(
        click.style(f"Generated {report.rendered} files", fg="green", bold=True),
    )
    click.echo(f"Not found: {report.not_found}")
    click.echo(f"Unsupported: {report.unsupported}")
    if report.failed:
        click.echo(
            click.style(f"Failed: {report.failed}", fg="red"),
            err=True,
        )
        for url_path in report.failures:
            click.echo(f"  - {url_path}", err=True)
        sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_or_exit(load: Callable[[], Config]) -> Config:
    """Load configuration, exiting with an error message when invalid.

    Args:
        load: Callable producing the Config

    Returns:
        Loaded configuration

    Raises:
        SystemExit: If the configuration cannot be loaded
    """
    try:
        return load()
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
