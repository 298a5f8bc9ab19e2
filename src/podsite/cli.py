"""CLI entry point for podsite."""

import asyncio
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from podsite.audio.mirror import AudioMirror
from podsite.compress.compressor import BrotliCompressor
from podsite.config.logging import setup_logging
from podsite.config.manager import ConfigManager
from podsite.config.schema import SiteConfig
from podsite.engine.builder import SiteBuilder
from podsite.utils.errors import ConfigError, PodsiteError

app = typer.Typer(
    name="podsite",
    help="Build, precompress and publish a podcast static site",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Site config file (default: ./podsite.yaml)"
    ),
) -> None:
    """podsite - build a podcast website from markdown, templates and audio."""
    ctx.obj = {"verbose": verbose, "log_file": log_file, "config_file": config_file}
    # Initialize logging before any command runs
    setup_logging(verbose=verbose, log_file=log_file)


def _load_config(ctx: typer.Context) -> SiteConfig:
    """Load the site config and apply its log level."""
    options = ctx.obj or {}
    config = ConfigManager(options.get("config_file")).load_config()
    setup_logging(
        verbose=options.get("verbose", False),
        log_file=options.get("log_file"),
        level=config.log_level,
    )
    return config


def _fail(message: str) -> None:
    console.print(f"[red]✗[/red] {escape(message)}")
    sys.exit(1)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from podsite import __version__

    console.print(f"[bold cyan]podsite[/bold cyan] v{__version__}")


@app.command("build")
def build_command(ctx: typer.Context) -> None:
    """Render pages, bundle CSS/JS and copy static assets.

    Examples:
        podsite build

        podsite --config site/podsite.yaml build
    """
    try:
        config = _load_config(ctx)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Building site...", total=None)
            report = asyncio.run(SiteBuilder(config).build())

        console.print(
            f"[green]✓[/green] Built {report.pages} page(s) into {config.output_dir}"
        )
        for asset in report.assets:
            console.print(f"[dim]  bundle: {asset}[/dim]")
        console.print(f"[dim]  copied {report.copied} static file(s)[/dim]")

    except ConfigError as e:
        _fail(f"Config error: {e}")
    except PodsiteError as e:
        _fail(f"Build failed: {e}")
    except OSError as e:
        _fail(f"Error: {e}")


@app.command("compress")
def compress_command(ctx: typer.Context) -> None:
    """Write brotli-compressed .br siblings for text assets in the output dir.

    Run after `podsite build`.
    """
    try:
        config = _load_config(ctx)
        compressor = BrotliCompressor(
            config.output_path,
            extensions=config.compression.extensions,
            quality=config.compression.quality,
        )
        report = asyncio.run(compressor.run())
        console.print(f"[green]✓[/green] {report.summary()}")

    except ConfigError as e:
        _fail(f"Config error: {e}")
    except PodsiteError as e:
        _fail(f"Compression failed: {e}")
    except OSError as e:
        _fail(f"Error: {e}")


@app.command("mirror")
def mirror_command(ctx: typer.Context) -> None:
    """Symlink episode audio files into the output episodes directory.

    Safe to run repeatedly; existing links are left alone.
    """
    try:
        config = _load_config(ctx)
        mirror = AudioMirror(
            config.episodes_source_path,
            config.episodes_output_path,
            extensions=config.audio.extensions,
        )
        report = asyncio.run(mirror.run())
        console.print(
            f"[green]✓[/green] Mirrored {report.episodes} episode(s): "
            f"{report.linked} linked, {report.existing} already present"
        )

    except ConfigError as e:
        _fail(f"Config error: {e}")
    except PodsiteError as e:
        _fail(f"Mirror failed: {e}")
    except OSError as e:
        _fail(f"Error: {e}")


if __name__ == "__main__":
    app()
