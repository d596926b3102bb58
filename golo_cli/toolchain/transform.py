"""Turn resolved packages into an ordered build plan."""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..context import BuildContext
from ..errors import ImportCycleError
from ..errors import PackageNotFoundError
from ..packages import Package
from ..resolution.dependencies import PSEUDO_PACKAGES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildPackage:
    """A package scheduled for compilation, with its output locations."""

    package: Package
    archive: Path
    binary: Path | None
    deps: tuple[str, ...]

    @property
    def import_path(self) -> str:
        return self.package.import_path


def binary_name(import_path: str, goos: str) -> str:
    """Executable name for a command: the last element of its import path."""
    name = posixpath.basename(import_path.rstrip("/")) or "main"
    return f"{name}.exe" if goos == "windows" else name


def transform(context: BuildContext, packages: Iterable[Package]) -> list[BuildPackage]:
    """Order ``packages`` so that every package follows its dependencies.

    Args:
        context: Supplies ``pkgdir``/``bindir`` and the target platform
        packages: A complete set: every import must be in it

    Returns:
        Build packages, dependencies first

    Raises:
        ImportCycleError: Two or more packages import each other
        PackageNotFoundError: An import is missing from ``packages``
    """
    if context.pkgdir is None or context.bindir is None:
        raise ValueError("build context needs pkgdir and bindir to plan a build")

    by_path: dict[str, Package] = {}
    for pkg in packages:
        by_path.setdefault(pkg.import_path, pkg)

    ordered: list[BuildPackage] = []
    done: set[str] = set()
    visiting: list[str] = []

    def visit(import_path: str) -> None:
        if import_path in done:
            return
        if import_path in visiting:
            cycle = visiting[visiting.index(import_path) :] + [import_path]
            raise ImportCycleError(cycle)
        pkg = by_path.get(import_path)
        if pkg is None:
            raise PackageNotFoundError(import_path)

        visiting.append(import_path)
        deps = tuple(i for i in pkg.imports if i not in PSEUDO_PACKAGES)
        for dep in deps:
            visit(dep)
        visiting.pop()
        done.add(import_path)

        target = context.pkgdir.joinpath(context.platform, *import_path.split("/"))
        archive = target.with_name(target.name + ".a")
        binary = context.bindir / binary_name(import_path, context.goos) if pkg.is_command else None
        ordered.append(BuildPackage(package=pkg, archive=archive, binary=binary, deps=deps))

    for import_path in by_path:
        visit(import_path)

    for bp in ordered:
        logger.debug(f"package : {bp.import_path}")
    return ordered
