"""Build step: order resolved packages and compile them with the Go toolchain."""

from .builder import ToolchainBuilder
from .transform import BuildPackage
from .transform import transform

__all__ = [
    "BuildPackage",
    "ToolchainBuilder",
    "transform",
]
