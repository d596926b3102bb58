"""Error types raised by package discovery, resolution and build.

Library code raises these; only the CLI entry point turns them into a
``fatal:`` message and a non-zero exit status.
"""

from pathlib import Path


class GoloError(Exception):
    """Base class for every error the CLI reports as fatal."""


class RepositoryNotFoundError(GoloError):
    """Raised when no version-control root exists above a directory."""

    def __init__(self, start: Path):
        self.start = start
        super().__init__(f"could not locate a repository root above {start}")


class ResolutionError(GoloError):
    """Base class for discovery and resolution failures."""


class PackageNotFoundError(ResolutionError):
    """Raised when an import path is not present in any search location."""

    def __init__(self, import_path: str, searched: list[Path] | None = None):
        self.import_path = import_path
        self.searched = searched or []
        message = f"cannot resolve import path {import_path!r}"
        if self.searched:
            message += " (searched: " + ", ".join(str(p) for p in self.searched) + ")"
        super().__init__(message)


class PackageIOError(ResolutionError):
    """Raised when a directory or source file cannot be listed or read."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"cannot read {path}: {cause.strerror or cause}")


class MalformedPackageError(ResolutionError):
    """Raised when a directory holds source that cannot form a package."""

    def __init__(self, path: Path, cause: str):
        self.path = path
        self.cause = cause
        super().__init__(f"malformed package in {path}: {cause}")


class NoBuildableSourceError(ResolutionError):
    """Raised when a directory has no buildable Go files for the target."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"no buildable Go source files in {path}")


class PinnedCacheMissingError(ResolutionError):
    """Raised when a pinned import path has no entry in the cache."""

    def __init__(self, import_path: str, path: Path):
        self.import_path = import_path
        self.path = path
        super().__init__(f"pinned package {import_path!r} is not cached at {path}")


class ImportCycleError(GoloError):
    """Raised when resolved packages import each other in a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__("import cycle not allowed: " + " -> ".join(cycle))


class BuildError(GoloError):
    """Raised when the Go toolchain fails to build a command."""


class RemoteURLError(GoloError):
    """Raised when the repository remote is missing or cannot be parsed."""


class SettingsError(GoloError):
    """Raised when ``.golo/settings.yaml`` cannot be read or is invalid."""
