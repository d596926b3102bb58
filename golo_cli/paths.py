"""Path policy: where golo keeps its per-project state.

Everything golo writes lives under ``<project root>/.golo/``:

- ``settings.yaml``: project settings
- ``cache/``: packages pinned to a cached snapshot
- ``pkg/``: compiled archives
"""

from pathlib import Path

TOOL_DIR_NAME = ".golo"


def get_tool_dir(project_root: Path) -> Path:
    return Path(project_root) / TOOL_DIR_NAME


def get_cache_dir(project_root: Path) -> Path:
    """Root of the sharded package cache."""
    return get_tool_dir(project_root) / "cache"


def get_pkg_dir(project_root: Path) -> Path:
    return get_tool_dir(project_root) / "pkg"


def get_settings_path(project_root: Path) -> Path:
    return get_tool_dir(project_root) / "settings.yaml"


def get_vendor_dir(project_root: Path) -> Path:
    return Path(project_root) / "vendor"
