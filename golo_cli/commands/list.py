"""The list command: show the packages a build would use."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from ..console import console
from ..errors import GoloError
from ..logging_setup import init_logging
from ..project import open_project
from . import fatal
from . import inherited


@click.command(name="list")
@click.option("--package", "package", default=None, help="The import path of your package")
@click.option("--deps/--no-deps", default=False, help="Include resolved dependencies")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def list_cmd(ctx: click.Context, package: str | None, deps: bool, verbose: bool):
    """List the project's packages, optionally with their dependencies."""
    package = inherited(ctx, "package", package)
    verbose = inherited(ctx, "verbose", verbose)
    init_logging(verbose=verbose)

    try:
        project = open_project(Path.cwd(), package=package)
        pkgs = project.load_sources()
        if deps:
            pkgs = project.load_dependencies(pkgs)
    except GoloError as e:
        fatal(e)

    if not pkgs:
        console.print("[dim]No packages found.[/dim]")
        return

    table = Table(title=f"Packages ({project.context.platform})")
    table.add_column("Import path", style="cyan")
    table.add_column("Name")
    table.add_column("Origin", style="dim")
    table.add_column("Files", justify="right")
    table.add_column("Imports", justify="right")

    for pkg in pkgs:
        table.add_row(pkg.import_path, pkg.name, project.origin(pkg), str(len(pkg.go_files)), str(len(pkg.imports)))

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {len(pkgs)} packages")
