"""Core type definitions"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, NamedTuple

# version -> platform key -> artifact object, exactly as served
ReleaseIndex = Dict[str, Any]


@dataclass(frozen=True)
class RunConfig:
    """Resolved settings for a single install run"""
    tar_dest: Path
    dest: Path
    bin_dir: Path
    lib_dir: Path
    index_url: str
    version: str


class ArtifactDescriptor(NamedTuple):
    """Download location and expected SHA-256 of a release archive."""

    tarball: str
    shasum: str


@dataclass(frozen=True)
class InstallResult:
    """Outcome of a successful install"""
    version: str
    platform: str
    binary: Path
    lib: Path
    downloaded: bool
