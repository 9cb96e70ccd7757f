"""
CLI for the disk cache.

Commands:
    adc path KEY - Print the entry path for a key
    adc has KEY - Exit 0 if the key is cached, 1 otherwise
    adc get KEY - Print (or save) a cached value
    adc set KEY [VALUE] - Store a value (or a file's contents)
    adc remove KEY - Delete an entry
    adc clear - Delete the whole cache root
    adc config - Show current configuration
    adc version - Print version
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from adc import __version__
from adc.cache import SYSTEM_NAME, DiskCache
from adc.config import Settings, clear_settings_cache, get_settings
from adc.exceptions import ADCError
from adc.logging import setup_logging
from adc.observability.metrics import get_registry

app = typer.Typer(
    name="adc",
    help="Async disk cache - inspect and manage an on-disk key/value cache",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


@dataclass
class CacheOptions:
    """Global options shared by every command."""

    name: str | None = None
    location: Path | None = None
    compression: str | None = None
    support_buffer: bool | None = None
    show_stats: bool = False


def _get_settings_safe() -> Settings | None:
    """Get settings, returning None if configuration is invalid."""
    try:
        clear_settings_cache()
        return get_settings()
    except ValidationError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        return None


def _open_cache(ctx: typer.Context) -> DiskCache:
    options: CacheOptions = ctx.obj
    settings = _get_settings_safe()
    if settings is None:
        raise typer.Exit(2)

    try:
        return DiskCache(
            name=options.name,
            location=options.location,
            compression=options.compression,
            support_buffer=options.support_buffer,
            settings=settings,
        )
    except ADCError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2) from e


def _print_stats() -> None:
    table = Table(title=f"{SYSTEM_NAME} metrics", show_header=True)
    table.add_column("Operation", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Time (ms)", justify="right", style="green")

    for operation, stats in get_registry().stats_for(SYSTEM_NAME).to_json().items():
        table.add_row(operation, str(stats["count"]), f"{stats['time'] / 1e6:.3f}")

    error_console.print(table)


@app.callback()
def main_callback(
    ctx: typer.Context,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Cache name (leaf directory)"),
    ] = None,
    location: Annotated[
        Optional[Path],
        typer.Option("--location", "-l", help="Base directory of the cache"),
    ] = None,
    compression: Annotated[
        Optional[str],
        typer.Option("--compression", "-c", help="none | deflateRaw | deflate | gzip"),
    ] = None,
    support_buffer: Annotated[
        Optional[bool],
        typer.Option("--buffer/--text", help="Treat values as bytes or as text"),
    ] = None,
    show_stats: Annotated[
        bool,
        typer.Option("--stats", help="Print operation metrics after the command"),
    ] = False,
) -> None:
    """Manage an on-disk key/value cache."""
    settings = _get_settings_safe()
    if settings is not None:
        setup_logging(settings.LOG_LEVEL, log_file=settings.LOG_FILE)

    ctx.obj = CacheOptions(
        name=name,
        location=location,
        compression=compression,
        support_buffer=support_buffer,
        show_stats=show_stats,
    )
    if show_stats:
        ctx.call_on_close(_print_stats)


@app.command()
def path(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Print the file path an entry for KEY is stored at."""
    cache = _open_cache(ctx)
    console.print(str(cache.path_for(key)), soft_wrap=True)


@app.command()
def has(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Exit with status 0 if KEY is cached, 1 otherwise."""
    cache = _open_cache(ctx)
    found = asyncio.run(cache.has(key))
    console.print("[green]cached[/green]" if found else "[yellow]not cached[/yellow]")
    if not found:
        raise typer.Exit(1)


@app.command()
def get(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the value to a file"),
    ] = None,
) -> None:
    """Print the value cached under KEY."""
    cache = _open_cache(ctx)

    try:
        entry = asyncio.run(cache.get(key))
    except ADCError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2) from e

    if not entry.is_cached:
        error_console.print(f"[yellow]Cache miss:[/yellow] {key}")
        raise typer.Exit(1)

    value = entry.value
    if output is not None:
        if isinstance(value, bytes):
            output.write_bytes(value)
        else:
            output.write_text(value or "", encoding="utf-8")
        error_console.print(f"[dim]Wrote[/dim] {output}")
    elif isinstance(value, bytes):
        sys.stdout.buffer.write(value)
        sys.stdout.flush()
    else:
        typer.echo(value, nl=False)


@app.command("set")
def set_(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key")],
    value: Annotated[
        Optional[str],
        typer.Argument(help="Value to store (omit when using --file)"),
    ] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Store the contents of a file", exists=True),
    ] = None,
) -> None:
    """Store VALUE (or the contents of --file) under KEY."""
    if (value is None) == (file is None):
        error_console.print("[red]Error:[/red] Provide either VALUE or --file")
        raise typer.Exit(2)

    cache = _open_cache(ctx)
    data: str | bytes = file.read_bytes() if file is not None else value  # type: ignore[assignment]
    file_path = asyncio.run(cache.set(key, data))
    console.print(str(file_path), soft_wrap=True)


@app.command()
def remove(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Delete the entry for KEY (succeeds if it does not exist)."""
    cache = _open_cache(ctx)
    asyncio.run(cache.remove(key))


@app.command()
def clear(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
) -> None:
    """Delete the cache root and every entry under it."""
    cache = _open_cache(ctx)
    if not yes:
        typer.confirm(f"Delete {cache.root}?", abort=True)
    asyncio.run(cache.clear())
    console.print(f"[green]Cleared[/green] {cache.root}", soft_wrap=True)


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = _get_settings_safe()
    if settings is None:
        error_console.print()
        error_console.print("Recognized environment variables:")
        error_console.print("  - ADC_CACHE_NAME, ADC_CACHE_LOCATION")
        error_console.print("  - ADC_COMPRESSION (none | deflateRaw | deflate | gzip)")
        error_console.print("  - ADC_SUPPORT_BUFFER, ADC_FILE_MODE")
        error_console.print("  - ADC_LOG_LEVEL, ADC_LOG_FILE")
        raise typer.Exit(2)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"async-disk-cache version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
