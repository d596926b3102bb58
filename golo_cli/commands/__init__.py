"""CLI commands for golo."""

import sys
from typing import NoReturn

import click
from rich.markup import escape

from ..console import err_console
from ..errors import GoloError

__all__ = [
    "build",
    "cache",
    "fatal",
    "inherited",
    "list",
]


def fatal(error: GoloError | str) -> NoReturn:
    """Print ``fatal: <error>`` to stderr and exit with status 1."""
    err_console.print(f"[bold red]fatal:[/bold red] {escape(str(error))}", highlight=False)
    sys.exit(1)


def inherited(ctx: click.Context, name: str, value):
    """Return ``value``, or the same option given to the ``golo`` group when unset."""
    if value:
        return value
    return (ctx.obj or {}).get(name, value)
