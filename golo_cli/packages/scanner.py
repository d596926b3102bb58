"""Walk a project tree and load every directory that holds a package."""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path
from pathlib import PurePath

from ..context import BuildContext
from ..errors import NoBuildableSourceError
from ..errors import PackageIOError
from .importer import import_dir
from .models import Package

logger = logging.getLogger(__name__)

# Directory names never scanned as packages
RESERVED_DIRS = frozenset({"testdata", "vendor"})


def is_skipped(name: str) -> bool:
    """True for hidden, underscore-prefixed and reserved directory names."""
    return name.startswith((".", "_")) or name in RESERVED_DIRS


def derive_module_id(prefix: str, relative_path: str | PurePath) -> str:
    """Derive an import path from a directory's position below the root.

    The import path is a function of where the directory sits, not of
    anything stored in it, so the same tree can be resolved under a
    different prefix simply by scanning it with that prefix.

    Args:
        prefix: Import path of the scan root
        relative_path: Directory path relative to the scan root

    Returns:
        ``prefix`` joined with the relative path's parts using ``/``
    """
    parts = [p for p in PurePath(relative_path).parts if p not in ("", ".")]
    if not parts:
        return prefix
    if not prefix:
        return posixpath.join(*parts)
    return posixpath.join(prefix, *parts)


def scan(prefix: str, directory: Path, context: BuildContext) -> list[Package]:
    """Load every package under ``directory``.

    Subdirectories come before the directory itself in the result, and
    siblings are visited in name order. A directory without buildable Go
    files contributes nothing; any other load failure propagates. Symlinked
    directories are not descended into.

    Args:
        prefix: Import path to assign to ``directory``
        directory: Root of the tree to scan
        context: Target platform used to select files

    Returns:
        Loaded packages, children before parents

    Raises:
        PackageIOError: A directory cannot be listed
        MalformedPackageError: A directory holds an unloadable package
    """
    directory = Path(directory)
    try:
        with os.scandir(directory) as it:
            children = sorted(
                (e.name for e in it if e.is_dir(follow_symlinks=False) and not is_skipped(e.name)),
            )
    except OSError as e:
        raise PackageIOError(directory, e) from e

    packages: list[Package] = []
    for name in children:
        packages.extend(scan(derive_module_id(prefix, name), directory / name, context))

    try:
        packages.append(import_dir(prefix, directory, context))
    except NoBuildableSourceError:
        logger.debug(f"[scan] {directory}: no buildable source, skipping")

    return packages
