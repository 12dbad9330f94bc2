"""Main CLI application using Typer."""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from favicon_api.version import __version__
from favicon_api.core.config import get_settings, rotate_hash_key
from favicon_api.core.exceptions import FaviconError
from favicon_api.core.logging import setup_logging
from favicon_api.core.urls import normalize_url
from favicon_api.infrastructure.cache import DiskCache
from favicon_api.orchestration import create_service

app = typer.Typer(
    name="favicon-api",
    help="favicon-api - locate and cache website favicons",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"favicon-api version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """favicon-api - locate and cache website favicons."""
    setup_logging()


@app.command()
def fetch(
    url: Annotated[str, typer.Argument(help="Site URL or hostname")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the icon to this file"),
    ] = None,
    refresh: Annotated[
        bool,
        typer.Option("--refresh", "-r", help="Ignore the cache and resolve again"),
    ] = False,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Neither read nor write the cache"),
    ] = False,
) -> None:
    """
    Resolve a site's favicon.

    Examples:
        favicon-api fetch example.com
        favicon-api fetch https://github.com -o github.ico --refresh
    """
    settings = get_settings()
    if no_cache:
        settings = settings.model_copy(update={"expire_seconds": 0})

    try:
        origin = normalize_url(url)
        service = create_service(settings)
        result = asyncio.run(service.get_favicon(url, refresh=refresh))
    except FaviconError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    source = result.strategy or ("cache" if result.cache_type else "default icon")
    console.print(
        Panel(
            f"Origin: [green]{origin.url}[/green]\n"
            f"Source: [cyan]{source}[/cyan]\n"
            f"Size: {len(result.content)} bytes\n"
            f"Default icon: {'yes' if result.is_default else 'no'}",
            title="Favicon",
        )
    )

    if output:
        output.write_bytes(result.content)
        console.print(f"[green]Saved to {output}[/green]")


@app.command("cache-path")
def cache_path(
    url: Annotated[str, typer.Argument(help="Site URL or hostname")],
) -> None:
    """Print the cache file used for a site."""
    settings = get_settings()
    if settings.has_insecure_hash_key():
        console.print("[yellow]Warning: default hash key in use; run rotate-key first.[/yellow]")
    try:
        origin = normalize_url(url)
    except FaviconError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    cache = DiskCache(settings.cache_dir, settings.get_hash_key())
    console.print(str(cache.path_for(origin)), soft_wrap=True)


@app.command("rotate-key")
def rotate_key() -> None:
    """Replace an insecure default hash key with a random one."""
    settings = get_settings()
    try:
        rotated = rotate_hash_key(settings)
    except FaviconError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    if rotated is settings:
        console.print("[green]Hash key is already custom; nothing to do.[/green]")
    else:
        console.print(f"[yellow]Hash key rotated and saved to {settings.env_file}[/yellow]")


@app.command()
def serve(
    host: Annotated[
        Optional[str],
        typer.Option("--host", "-h", help="Host to bind to"),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to bind to"),
    ] = None,
    reload: Annotated[
        bool,
        typer.Option("--reload", "-r", help="Enable auto-reload for development"),
    ] = False,
) -> None:
    """Start the favicon HTTP server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(
        Panel(
            f"[bold blue]Starting API Server[/bold blue]\n"
            f"Host: [green]{host}[/green]\n"
            f"Port: [green]{port}[/green]\n"
            f"Docs: [cyan]http://{host}:{port}/docs[/cyan]",
            title="API Server",
        )
    )

    uvicorn.run(
        "favicon_api.api.app:app",
        host=host,
        port=port,
        reload=reload,
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
