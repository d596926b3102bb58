"""Version-control helpers: repository root, remote URL and package guess."""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from .errors import RemoteURLError
from .errors import RepositoryNotFoundError

logger = logging.getLogger(__name__)

# Marker directory (or file, for git worktrees and submodules) -> VCS name
VCS_MARKERS = {
    ".git": "git",
    ".hg": "hg",
    ".bzr": "bzr",
    ".svn": "svn",
}

_SCP_LIKE = re.compile(r"^(?:[\w.+-]+@)?(?P<host>[\w.-]+):(?P<path>(?!//).+)$")


@dataclass(frozen=True)
class Repository:
    """A working copy: its root directory and which VCS manages it."""

    root: Path
    kind: str

    def remote(self) -> str:
        """Return the URL of the default remote.

        Raises:
            RemoteURLError: The VCS reports no default remote
        """
        if self.kind == "git":
            cmd = ["git", "-C", str(self.root), "config", "--get", "remote.origin.url"]
        elif self.kind == "hg":
            cmd = ["hg", "-R", str(self.root), "paths", "default"]
        else:
            raise RemoteURLError(f"cannot read the remote of a {self.kind} repository at {self.root}")

        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise RemoteURLError(f"no default remote configured for {self.root}: {e}") from e

        url = result.stdout.strip()
        if not url:
            raise RemoteURLError(f"no default remote configured for {self.root}")
        return url


def detect(start: Path) -> Repository:
    """Find the closest repository containing ``start``.

    Raises:
        RepositoryNotFoundError: No ancestor holds a VCS marker
    """
    start = Path(start).resolve()
    for directory in (start, *start.parents):
        for marker, kind in VCS_MARKERS.items():
            if (directory / marker).exists():
                logger.debug(f"Repository root {directory} ({kind})")
                return Repository(root=directory, kind=kind)
    raise RepositoryNotFoundError(start)


def guess_package(remote: str) -> str:
    """Derive an import path prefix from a remote URL.

    ``https://github.com/acme/widget.git`` and ``git@github.com:acme/widget``
    both give ``github.com/acme/widget``.

    Raises:
        RemoteURLError: The URL has no host
    """
    remote = remote.strip()
    if "://" not in remote and (m := _SCP_LIKE.match(remote)):
        host, path = m.group("host"), "/" + m.group("path")
    else:
        uri = urlparse(remote)
        host, path = uri.hostname or "", uri.path

    if not host:
        raise RemoteURLError(f"cannot guess a package from remote {remote!r}")

    path = path.rstrip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    return host + path
