"""Package descriptors produced by the scanner and the resolver."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Package:
    """One loaded Go package.

    ``import_path`` is always assigned by whoever loaded the directory (the
    scanner or a resolver), never read from the source itself, because the
    same tree can be mounted under different identifier prefixes.
    """

    import_path: str
    dir: Path
    name: str
    imports: tuple[str, ...] = ()
    go_files: tuple[str, ...] = ()
    ignored_files: tuple[str, ...] = ()
    other_files: tuple[str, ...] = ()
    goroot: bool = False

    @property
    def is_command(self) -> bool:
        """True for ``package main``."""
        return self.name == "main"

    def __str__(self) -> str:
        return f"{self.import_path} ({self.name})"
