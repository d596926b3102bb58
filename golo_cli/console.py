"""Shared Rich console instances for CLI output."""

from rich.console import Console

console = Console()

# Diagnostics and fatal errors
err_console = Console(stderr=True)

__all__ = ["console", "err_console"]
