"""Go package model, loader and project tree scanner."""

from .importer import import_dir
from .models import Package
from .scanner import derive_module_id
from .scanner import scan

__all__ = [
    "Package",
    "derive_module_id",
    "import_dir",
    "scan",
]
