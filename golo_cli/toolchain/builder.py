"""Compile a build plan with the Go toolchain.

The resolved packages are laid out as a GOPATH tree in the work directory
(one symlink per source file, so nested import paths never write into the
project), and ``go build`` runs in GOPATH mode against that tree. Standard
library packages come from the toolchain itself and are not laid out.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable
from collections.abc import Sequence
from pathlib import Path

from ..context import BuildContext
from ..errors import BuildError
from .transform import BuildPackage

logger = logging.getLogger(__name__)


class ToolchainBuilder:
    """Builds planned packages with ``go build``."""

    def __init__(self, context: BuildContext, go: str = "go"):
        if context.workdir is None:
            raise ValueError("build context needs a workdir")
        self.context = context
        self.go = go
        self.gopath = Path(context.workdir)

    def environment(self) -> dict[str, str]:
        env = dict(os.environ)
        env.update(
            {
                "GO111MODULE": "off",
                "GOPATH": str(self.gopath),
                "GOROOT": str(self.context.goroot),
                "GOOS": self.context.goos,
                "GOARCH": self.context.goarch,
                "CGO_ENABLED": "1" if self.context.cgo_enabled else "0",
                "GOFLAGS": "",
            }
        )
        return env

    def layout(self, packages: Sequence[BuildPackage]) -> None:
        """Link every non-standard package's sources into ``$GOPATH/src``.

        Raises:
            BuildError: The work tree cannot be created
        """
        for bp in packages:
            pkg = bp.package
            if pkg.goroot:
                continue
            target = self.gopath.joinpath("src", *pkg.import_path.split("/"))
            try:
                target.mkdir(parents=True, exist_ok=True)
                for name in (*pkg.go_files, *pkg.other_files):
                    link = target / name
                    if link.is_symlink() or link.exists():
                        link.unlink()
                    link.symlink_to(pkg.dir / name)
            except OSError as e:
                raise BuildError(f"cannot lay out {pkg.import_path} in {target}: {e}") from e
            logger.debug(f"laid out {pkg.import_path} -> {target}")

    def command(self, bp: BuildPackage) -> list[str]:
        output = bp.binary if bp.binary is not None else bp.archive
        cmd = [self.go, "build", "-o", str(output)]
        if self.context.build_tags:
            cmd += ["-tags", ",".join(self.context.build_tags)]
        cmd.append(bp.import_path)
        return cmd

    def build_packages(self, packages: Sequence[BuildPackage]) -> Callable[[], None]:
        """Prepare the work tree and return the action that compiles it.

        Packages are compiled in the given order, which :func:`transform`
        guarantees puts dependencies first.
        """
        self.layout(packages)
        steps = [bp for bp in packages if not bp.package.goroot]
        env = self.environment()

        def run() -> None:
            for bp in steps:
                output = bp.binary if bp.binary is not None else bp.archive
                output.parent.mkdir(parents=True, exist_ok=True)
                cmd = self.command(bp)
                logger.debug(f"Running: {' '.join(cmd)}")
                try:
                    subprocess.run(cmd, check=True, capture_output=True, text=True, env=env, cwd=self.gopath)
                except FileNotFoundError as e:
                    raise BuildError(f"go toolchain not found: {self.go}") from e
                except subprocess.CalledProcessError as e:
                    detail = (e.stderr or e.stdout or "").strip()
                    raise BuildError(f"building {bp.import_path} failed:\n{detail}") from e
                logger.info(f"built {bp.import_path} -> {output}")

        return run
