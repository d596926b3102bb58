"""Resolvers that map an import path to a loaded package.

Concrete implementations of the PackageResolver protocol:
- StandardLibraryResolver: ``$GOROOT/src/<import path>``
- VendorResolver: ``<project root>/vendor/<import path>``
- PinnedCacheResolver: ``<cache dir for scope>/<import path>`` for every
  import path under a pinned prefix
- ResolverChain: tries resolvers in order, first match wins

A resolver returns None when the import path is not its to answer. Once a
resolver has found the directory, load failures propagate; they are never
retried against the next resolver.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol
from typing import runtime_checkable

from ..context import BuildContext
from ..errors import PackageNotFoundError
from ..errors import PinnedCacheMissingError
from ..packages import Package
from ..packages import import_dir
from ..paths import get_vendor_dir
from .cache import cache_path
from .cache import scope_key

logger = logging.getLogger(__name__)


@runtime_checkable
class PackageResolver(Protocol):
    """Protocol for package resolvers."""

    def resolve(self, import_path: str) -> Package | None:
        """Load the package for ``import_path``, or None if not found here."""
        ...

    def candidate_dir(self, import_path: str) -> Path | None:
        """Directory this resolver would load ``import_path`` from."""
        ...


def is_valid_import_path(import_path: str) -> bool:
    """Reject paths that would escape the directory they are joined to."""
    if not import_path or import_path.startswith("/") or "\\" in import_path:
        return False
    return all(part not in ("", ".", "..") for part in import_path.split("/"))


class _RootResolver:
    """Resolves import paths below a single root directory."""

    label = "root"

    def __init__(self, root: Path, context: BuildContext):
        self.root = Path(root)
        self.context = context

    def candidate_dir(self, import_path: str) -> Path | None:
        if not is_valid_import_path(import_path):
            return None
        return self.root.joinpath(*import_path.split("/"))

    def resolve(self, import_path: str) -> Package | None:
        directory = self.candidate_dir(import_path)
        if directory is None or not directory.is_dir():
            logger.debug(f"[resolve:{self.label}] {import_path} not in {self.root}")
            return None
        logger.debug(f"[resolve:{self.label}] {import_path} -> {directory}")
        return import_dir(import_path, directory, self.context)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.root})"


class StandardLibraryResolver(_RootResolver):
    """Finds packages in the Go standard library root."""

    label = "std"

    def __init__(self, context: BuildContext):
        super().__init__(context.stdlib_root, context)


class VendorResolver(_RootResolver):
    """Finds packages in the project's ``vendor/`` directory."""

    label = "vendor"

    def __init__(self, project_root: Path, context: BuildContext):
        super().__init__(get_vendor_dir(project_root), context)


class PinnedCacheResolver:
    """Serves every import path under ``prefix`` from one cached snapshot.

    The snapshot directory is derived from the scope ``prefix + kind + "=" +
    arg``, so pinning ``github.com/acme`` with kind ``rev`` and argument
    ``abc123`` always reads from the same cache location. Import paths under
    the prefix must exist there; they never fall back to other resolvers.
    """

    def __init__(self, project_root: Path, prefix: str, kind: str, arg: str, context: BuildContext):
        self.prefix = prefix
        self.kind = kind
        self.arg = arg
        self.context = context
        self.cache_dir = cache_path(project_root, scope_key(prefix, kind, arg))
        logger.debug(f"registered: {prefix} @ {arg} ({kind}) -> {self.cache_dir}")

    def owns(self, import_path: str) -> bool:
        return import_path.startswith(self.prefix)

    def candidate_dir(self, import_path: str) -> Path | None:
        if not self.owns(import_path) or not is_valid_import_path(import_path):
            return None
        return self.cache_dir.joinpath(*import_path.split("/"))

    def resolve(self, import_path: str) -> Package | None:
        if not self.owns(import_path):
            return None
        directory = self.candidate_dir(import_path)
        if directory is None or not directory.is_dir():
            raise PinnedCacheMissingError(import_path, directory or self.cache_dir)
        logger.debug(f"[resolve:pinned] searching {import_path} in {self.prefix} @ {self.arg}")
        return import_dir(import_path, directory, self.context)

    def __repr__(self) -> str:
        return f"PinnedCacheResolver({self.prefix}{self.kind}={self.arg})"


class ResolverChain:
    """Ordered list of resolvers; the first one that answers wins."""

    def __init__(self, resolvers: Iterable[PackageResolver]):
        self.resolvers: list[PackageResolver] = list(resolvers)

    def candidate_dir(self, import_path: str) -> Path | None:
        for resolver in self.resolvers:
            if (directory := resolver.candidate_dir(import_path)) is not None:
                return directory
        return None

    def resolve(self, import_path: str) -> Package:
        """Resolve ``import_path`` through the chain.

        Raises:
            PackageNotFoundError: No resolver knows the import path
        """
        for resolver in self.resolvers:
            package = resolver.resolve(import_path)
            if package is not None:
                return package

        searched = [d for r in self.resolvers if (d := r.candidate_dir(import_path)) is not None]
        raise PackageNotFoundError(import_path, searched)

    def __repr__(self) -> str:
        return f"ResolverChain({self.resolvers!r})"


def standard_chain(project_root: Path, context: BuildContext) -> ResolverChain:
    """Standard library root first, then the vendor directory."""
    return ResolverChain([StandardLibraryResolver(context), VendorResolver(project_root, context)])


def register(
    project_root: Path,
    prefix: str,
    kind: str,
    arg: str,
    fallback: PackageResolver,
    context: BuildContext,
) -> ResolverChain:
    """Pin every import path under ``prefix`` to a cached snapshot.

    Import paths outside ``prefix`` are passed to ``fallback`` unchanged.
    """
    return ResolverChain([PinnedCacheResolver(project_root, prefix, kind, arg, context), fallback])
