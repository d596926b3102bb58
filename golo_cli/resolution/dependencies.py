"""Expand a set of packages into its full transitive import graph."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..context import BuildContext
from ..errors import PackageNotFoundError
from ..packages import Package
from .resolvers import PackageResolver
from .resolvers import standard_chain

logger = logging.getLogger(__name__)

# Import paths handled by the toolchain rather than loaded from disk
PSEUDO_PACKAGES = frozenset({"C"})


class DependencyResolver:
    """Walks imports depth-first, loading each import path exactly once.

    The seen-set belongs to a single ``resolve()`` call, so one resolver can
    serve several runs in the same process.
    """

    def __init__(self, resolver: PackageResolver):
        self.resolver = resolver

    def resolve(self, initial: Iterable[Package]) -> list[Package]:
        """Return ``initial`` followed by every package it transitively imports.

        Packages already in ``initial`` are never loaded again, even when
        something else imports them. Discovery order is depth-first in import
        order.

        Raises:
            ResolutionError: Any import cannot be resolved or loaded; no
                partial result is returned
        """
        packages = list(initial)
        seen: set[str] = {p.import_path for p in packages}

        for src in list(packages):
            # Work stack of pending import paths, reversed so pops follow source order.
            stack = list(reversed(src.imports))
            if src.imports:
                logger.debug(f"import: {src.import_path} -> {', '.join(src.imports)}")
            while stack:
                import_path = stack.pop()
                if import_path in PSEUDO_PACKAGES:
                    continue
                if import_path in seen:
                    logger.debug(f"Skipping {import_path}, already seen")
                    continue
                seen.add(import_path)

                logger.debug(f"Walking: {import_path}")
                pkg = self.resolver.resolve(import_path)
                if pkg is None:
                    # A bare resolver (not a chain) declined the path.
                    raise PackageNotFoundError(import_path)
                packages.append(pkg)
                stack.extend(reversed(pkg.imports))

        return packages


def resolve(
    project_root: Path,
    initial: Iterable[Package],
    context: BuildContext,
    resolver: PackageResolver | None = None,
) -> list[Package]:
    """Resolve the transitive imports of ``initial``.

    Args:
        project_root: Root whose ``vendor/`` directory is searched
        initial: Packages found by scanning the project
        context: Target platform used when loading packages
        resolver: Resolution chain (default: standard library, then vendor)

    Returns:
        Every initial and imported package, each exactly once
    """
    if resolver is None:
        resolver = standard_chain(project_root, context)
    return DependencyResolver(resolver).resolve(initial)
