"""Project settings stored in ``<project root>/.golo/settings.yaml``.

Example::

    package: github.com/acme/widget
    tags: [netgo]
    pins:
      - prefix: github.com/acme/lib
        kind: rev
        arg: 4f2a9c1
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .errors import SettingsError
from .paths import get_settings_path

logger = logging.getLogger(__name__)


class PinConfig(BaseModel):
    """Serve every import path under ``prefix`` from a cached snapshot."""

    prefix: str = Field(..., min_length=1, description="Import path prefix to pin")
    kind: str = Field(default="rev", description="What the argument names (rev, tag, version)")
    arg: str = Field(..., min_length=1, description="Snapshot identifier, e.g. a revision")


class ProjectSettings(BaseModel):
    """Complete project settings."""

    package: str | None = Field(None, description="Import path prefix of the project root")
    tags: list[str] = Field(default_factory=list, description="Extra build tags")
    pins: list[PinConfig] = Field(default_factory=list)


def load_settings(project_root: Path) -> ProjectSettings:
    """Read project settings, falling back to defaults when the file is absent.

    Raises:
        SettingsError: The file exists but is not valid YAML or fails validation
    """
    path = get_settings_path(project_root)
    if not path.exists():
        return ProjectSettings()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise SettingsError(f"cannot read {path}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"{path}: expected a mapping at the top level")

    try:
        settings = ProjectSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"invalid settings in {path}:\n{e}") from e

    logger.debug(f"Loaded settings from {path}: {len(settings.pins)} pins")
    return settings
