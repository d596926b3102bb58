"""The build command: scan, resolve and compile the current project."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

import click

from ..console import console
from ..errors import GoloError
from ..logging_setup import init_logging
from ..project import open_project
from ..toolchain import ToolchainBuilder
from ..toolchain import transform
from . import fatal
from . import inherited

logger = logging.getLogger(__name__)


@click.command(name="build")
@click.option("--package", "package", default=None, help="The import path of your package")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def build_cmd(ctx: click.Context, package: str | None, verbose: bool):
    """Resolve every dependency of the project and build its commands."""
    package = inherited(ctx, "package", package)
    verbose = inherited(ctx, "verbose", verbose)
    init_logging(verbose=verbose)

    try:
        project = open_project(Path.cwd(), package=package)

        logger.info("load local sources")
        srcs = project.load_sources()
        logger.info("load dependencies")
        srcs = project.load_dependencies(srcs)

        with tempfile.TemporaryDirectory(prefix="golo") as workdir:
            project.context.workdir = Path(workdir)
            pkgs = transform(project.context, srcs)
            run = ToolchainBuilder(project.context).build_packages(pkgs)
            run()
    except GoloError as e:
        fatal(e)

    commands = [bp for bp in pkgs if bp.binary is not None]
    for bp in commands:
        console.print(f"[green]✓[/green] {bp.import_path} -> [cyan]{bp.binary}[/cyan]")
    if not commands:
        console.print(f"[green]✓[/green] built {sum(1 for bp in pkgs if not bp.package.goroot)} packages")
