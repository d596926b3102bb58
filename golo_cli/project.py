"""One project: its root, settings, import path prefix and resolver chain.

This is the glue the CLI commands share. It wires the collaborators in the
order a build needs them: repository detection, settings, scan, resolve.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from .context import BuildContext
from .packages import Package
from .packages import scan
from .paths import get_cache_dir
from .paths import get_pkg_dir
from .paths import get_vendor_dir
from .resolution import PackageResolver
from .resolution import register
from .resolution import resolve
from .resolution import standard_chain
from .settings import ProjectSettings
from .settings import load_settings
from .vcs import Repository
from .vcs import detect
from .vcs import guess_package

logger = logging.getLogger(__name__)


@dataclass
class Project:
    """A project ready to be scanned and resolved."""

    root: Path
    prefix: str
    context: BuildContext
    settings: ProjectSettings = field(default_factory=ProjectSettings)

    def resolver(self) -> PackageResolver:
        """Standard chain wrapped by one pinned-cache layer per configured pin.

        Pins are checked in the order they are listed in the settings.
        """
        chain: PackageResolver = standard_chain(self.root, self.context)
        for pin in reversed(self.settings.pins):
            chain = register(self.root, pin.prefix, pin.kind, pin.arg, chain, self.context)
        return chain

    def load_sources(self) -> list[Package]:
        """Scan the project tree for local packages."""
        srcs = scan(self.prefix, self.root, self.context)
        for src in srcs:
            logger.info(f"loaded {src.import_path} ({src.name})")
        return srcs

    def load_dependencies(self, srcs: list[Package]) -> list[Package]:
        """Expand ``srcs`` with everything they transitively import."""
        return resolve(self.root, srcs, self.context, resolver=self.resolver())

    def origin(self, pkg: Package) -> str:
        """Where a package was found: std, vendor, pinned or project."""
        if pkg.goroot:
            return "std"
        if pkg.dir.is_relative_to(get_vendor_dir(self.root)):
            return "vendor"
        if pkg.dir.is_relative_to(get_cache_dir(self.root)):
            return "pinned"
        return "project"


def choose_prefix(repo: Repository, settings: ProjectSettings, override: str | None) -> str:
    """Pick the import path prefix of the project root.

    Precedence: explicit override, then ``package`` in settings, then a
    guess from the repository's default remote.
    """
    if override:
        logger.info(f"Using provided package {override}")
        return override
    if settings.package:
        logger.info(f"Using configured package {settings.package}")
        return settings.package
    prefix = guess_package(repo.remote())
    logger.info(f"Using guessed package {prefix}")
    return prefix


def open_project(start: Path, package: str | None = None, context: BuildContext | None = None) -> Project:
    """Detect the repository around ``start`` and prepare it for a build.

    Raises:
        GoloError: No repository, unreadable settings or no usable prefix
    """
    repo = detect(start)
    logger.info(f"Repository Root {repo.root}")
    settings = load_settings(repo.root)
    prefix = choose_prefix(repo, settings, package)

    if context is None:
        context = BuildContext(build_tags=tuple(settings.tags))
    context.pkgdir = context.pkgdir or get_pkg_dir(repo.root)
    context.bindir = context.bindir or repo.root
    return Project(root=repo.root, prefix=prefix, context=context, settings=settings)
