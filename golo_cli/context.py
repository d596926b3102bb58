"""Build context: the target platform and the directories a build uses."""

from __future__ import annotations

import logging
import os
import platform
import shutil
import subprocess
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_GOROOT = Path("/usr/local/go")

# Go's names for the values platform.machine() reports
_MACHINE_TO_GOARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "mips64": "mips64",
    "loongarch64": "loong64",
}


def host_goos() -> str:
    """Return the Go name for the host operating system."""
    system = platform.system().lower()
    if system.startswith(("cygwin", "msys", "mingw")):
        return "windows"
    return system or "linux"


def host_goarch() -> str:
    """Return the Go name for the host architecture."""
    machine = platform.machine().lower()
    return _MACHINE_TO_GOARCH.get(machine, machine or "amd64")


def find_goroot() -> Path:
    """Locate the Go standard library root.

    Resolution order (first match wins):
    1. ``GOROOT`` environment variable
    2. ``go env GOROOT`` when a ``go`` binary is on PATH
    3. ``/usr/local/go``
    """
    if env_value := os.environ.get("GOROOT"):
        return Path(env_value)

    go = shutil.which("go")
    if go:
        try:
            result = subprocess.run([go, "env", "GOROOT"], check=True, capture_output=True, text=True)
            if goroot := result.stdout.strip():
                return Path(goroot)
        except (OSError, subprocess.CalledProcessError) as e:
            logger.debug(f"go env GOROOT failed: {e}")

    return DEFAULT_GOROOT


def _cgo_from_env() -> bool:
    return os.environ.get("CGO_ENABLED", "0") == "1"


@dataclass
class BuildContext:
    """Target platform and directory layout for one build invocation.

    ``goos``/``goarch`` pick which files belong to a package; ``workdir``,
    ``pkgdir`` and ``bindir`` are where the build step writes its output.
    """

    goos: str = field(default_factory=lambda: os.environ.get("GOOS") or host_goos())
    goarch: str = field(default_factory=lambda: os.environ.get("GOARCH") or host_goarch())
    goroot: Path = field(default_factory=find_goroot)
    cgo_enabled: bool = field(default_factory=_cgo_from_env)
    build_tags: tuple[str, ...] = ()
    workdir: Path | None = None
    pkgdir: Path | None = None
    bindir: Path | None = None

    @property
    def stdlib_root(self) -> Path:
        """Directory holding the standard library packages."""
        return self.goroot / "src"

    @property
    def platform(self) -> str:
        return f"{self.goos}_{self.goarch}"
