"""golo - build Go projects from a resolved package graph."""

import click

from .commands.build import build_cmd
from .commands.cache import cache as cache_group
from .commands.list import list_cmd


@click.group(invoke_without_command=True)
@click.version_option(package_name="golo")
@click.option("--package", "package", default=None, help="The import path of your package")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, package: str | None, verbose: bool):
    """golo - resolve a Go project's packages and build it.

    Without a subcommand, runs `golo build`. Options given here also apply
    to the subcommand that follows them.
    """
    ctx.ensure_object(dict)
    ctx.obj["package"] = package
    ctx.obj["verbose"] = verbose

    if ctx.invoked_subcommand is None:
        ctx.invoke(build_cmd, package=package, verbose=verbose)


cli.add_command(build_cmd)
cli.add_command(list_cmd)
cli.add_command(cache_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
