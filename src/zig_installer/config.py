"""Run configuration from flags, environment and defaults."""
import os
from pathlib import Path
from typing import Mapping, NamedTuple, Optional, Tuple

from zig_installer import constants
from zig_installer.types import RunConfig


class ConfigOption(NamedTuple):
    """One resolvable setting."""

    name: str
    env_var: str
    default: str
    help: str


OPTIONS: Tuple[ConfigOption, ...] = (
    ConfigOption(
        "tar_dest", "ZIG_TAR_DEST", constants.DEFAULT_TAR_DEST,
        "Path to download the Zig tarball",
    ),
    ConfigOption(
        "dest", "ZIG_DEST", constants.DEFAULT_DEST,
        "Temporary directory for extraction",
    ),
    ConfigOption(
        "bin_dir", "ZIG_BIN_DIR", constants.DEFAULT_BIN_DIR,
        "Installation directory for Zig binary",
    ),
    ConfigOption(
        "lib_dir", "ZIG_LIB_DIR", constants.DEFAULT_LIB_DIR,
        "Installation directory for Zig libraries",
    ),
    ConfigOption(
        "index_url", "ZIG_INDEX_URL", constants.DEFAULT_INDEX_URL,
        "URL for Zig download index",
    ),
    ConfigOption(
        "version", "ZIG_VERSION", constants.DEFAULT_VERSION,
        "Zig version to install (e.g., master, 0.11.0)",
    ),
)

PATH_OPTIONS = {"tar_dest", "dest", "bin_dir", "lib_dir"}


def resolve_option(
    option: ConfigOption,
    flags: Mapping[str, Optional[str]],
    environ: Mapping[str, str],
) -> str:
    """Flag value, then environment variable, then default."""
    value = flags.get(option.name)
    if value is not None:
        return value
    if option.env_var in environ:
        return environ[option.env_var]
    return option.default


def resolve_config(
    flags: Optional[Mapping[str, Optional[str]]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    """Build the immutable run configuration."""
    flags = flags or {}
    environ = os.environ if environ is None else environ

    values = {}
    for option in OPTIONS:
        value = resolve_option(option, flags, environ)
        values[option.name] = Path(value) if option.name in PATH_OPTIONS else value

    return RunConfig(**values)
