"""Zig toolchain installer."""

from zig_installer.types import ArtifactDescriptor, InstallResult, ReleaseIndex, RunConfig
from zig_installer.config import resolve_config
from zig_installer.pipeline import run_install
from zig_installer.errors import (
    InstallerError,
    PreconditionError,
    NetworkError,
    FormatError,
    NotFoundError,
    ChecksumError,
    ExtractionError,
    InstallationError,
)

__version__ = "0.1.0"

__all__ = [
    # Types
    "ArtifactDescriptor",
    "InstallResult",
    "ReleaseIndex",
    "RunConfig",

    # Entry points
    "resolve_config",
    "run_install",

    # Error types
    "InstallerError",
    "PreconditionError",
    "NetworkError",
    "FormatError",
    "NotFoundError",
    "ChecksumError",
    "ExtractionError",
    "InstallationError",
]
