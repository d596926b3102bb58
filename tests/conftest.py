"""Pytest configuration for golo tests.

Fixtures build small Go trees on disk: a fake standard library root and
helpers to write packages into a project.
"""

from pathlib import Path

import pytest

from golo_cli.context import BuildContext


def write_go(directory: Path, file_name: str, package: str, imports=(), header: str = "") -> Path:
    """Write one Go source file declaring ``package`` and ``imports``."""
    directory.mkdir(parents=True, exist_ok=True)
    lines = []
    if header:
        lines += [header, ""]
    lines.append(f"package {package}")
    if imports:
        lines += ["", "import ("]
        lines += [f'\t"{path}"' for path in imports]
        lines.append(")")
    lines += ["", "func init() {}", ""]
    path = directory / file_name
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


@pytest.fixture
def goroot(tmp_path):
    """Minimal standard library: errors <- io <- fmt, plus unsafe."""
    root = tmp_path / "goroot"
    src = root / "src"
    write_go(src / "errors", "errors.go", "errors")
    write_go(src / "io", "io.go", "io", imports=["errors"])
    write_go(src / "fmt", "print.go", "fmt", imports=["errors", "io"])
    write_go(src / "unsafe", "unsafe.go", "unsafe")
    return root


@pytest.fixture
def context(goroot):
    """Linux/amd64 build context over the fake standard library."""
    return BuildContext(goos="linux", goarch="amd64", goroot=goroot, cgo_enabled=False)


@pytest.fixture
def project_root(tmp_path):
    """Empty project directory that looks like a git checkout."""
    root = tmp_path / "project"
    (root / ".git").mkdir(parents=True)
    return root


@pytest.fixture
def go_file():
    """The write_go helper, for tests that build their own trees."""
    return write_go
