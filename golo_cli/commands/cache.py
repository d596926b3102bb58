"""Cache commands: inspect the pinned-package cache under .golo/cache/."""

from __future__ import annotations

import contextlib
from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..errors import GoloError
from ..paths import get_cache_dir
from ..resolution import cache_path
from ..resolution import scope_key
from ..settings import load_settings
from ..vcs import detect
from . import fatal


def _get_dir_size(path: Path) -> int:
    """Get total size of a directory in bytes."""
    total = 0
    with contextlib.suppress(OSError):
        for entry in path.rglob("*"):
            if entry.is_file():
                with contextlib.suppress(OSError):
                    total += entry.stat().st_size
    return total


def _format_size(size_bytes: int) -> str:
    """Format bytes as human-readable size."""
    size_float = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size_float < 1024:
            return f"{size_float:.1f} {unit}"
        size_float /= 1024
    return f"{size_float:.1f} TB"


def _project_root() -> Path:
    try:
        return detect(Path.cwd()).root
    except GoloError as e:
        fatal(e)


@click.group(invoke_without_command=True)
@click.pass_context
def cache(ctx: click.Context):
    """Inspect the pinned-package cache.

    Pinned import path prefixes are served from .golo/cache/<shard>/<leaf>,
    where the directory is derived from the pin's prefix, kind and argument.
    """
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@cache.command(name="path")
@click.argument("prefix")
@click.argument("kind")
@click.argument("arg")
def cache_path_cmd(prefix: str, kind: str, arg: str):
    """Show the cache directory for PREFIX pinned as KIND=ARG."""
    directory = cache_path(_project_root(), scope_key(prefix, kind, arg))
    console.print(f"[cyan]{directory}[/cyan]", highlight=False)

    if directory.exists():
        console.print("[dim]Status: exists[/dim]")
    else:
        console.print("[dim]Status: not populated yet[/dim]")


@cache.command(name="list")
def cache_list():
    """List the pins configured in .golo/settings.yaml with their cache state."""
    root = _project_root()
    try:
        settings = load_settings(root)
    except GoloError as e:
        fatal(e)

    if not settings.pins:
        console.print("[dim]No pins configured.[/dim]")
        console.print(f"[dim]Cache: {get_cache_dir(root)}[/dim]")
        return

    table = Table(title="Pinned Packages")
    table.add_column("Prefix", style="cyan")
    table.add_column("Pin", style="green")
    table.add_column("Directory", style="dim")
    table.add_column("Size", justify="right")

    for pin in settings.pins:
        directory = cache_path(root, scope_key(pin.prefix, pin.kind, pin.arg))
        size = _format_size(_get_dir_size(directory)) if directory.exists() else "missing"
        table.add_row(pin.prefix, f"{pin.kind}={pin.arg}", str(directory.relative_to(root)), size)

    console.print(table)
