"""Archive extraction and placement of the installed files."""
import asyncio
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Tuple

from zig_installer.constants import LIB_SUBDIR, REQUIRED_TOOLS, TOOL_NAME, XZ_SUFFIX
from zig_installer.errors import ExtractionError, InstallationError, PreconditionError
from zig_installer.logging import get_logger
from zig_installer.types import RunConfig

logger = get_logger(__name__)


def check_dependencies(tools: Iterable[str] = REQUIRED_TOOLS) -> None:
    """Fail early when an external tool is not on PATH."""
    for tool in tools:
        if shutil.which(tool) is None:
            raise PreconditionError(tool)
        logger.debug("Found dependency", tool=tool)


def tar_command(archive: Path, dest: Path) -> List[str]:
    """Build the tar invocation that flattens the archive's top directory into ``dest``."""
    args = ["-xf", str(archive), "-C", str(dest), "--strip-components=1"]
    if str(archive).endswith(XZ_SUFFIX):
        args = ["-J", *args]
    return ["tar", *args]


async def async_subprocess_run(*args: str) -> Tuple[int, str]:
    """Run a command and return its exit code and combined stdout/stderr."""
    proc = await asyncio.create_subprocess_exec(
        *args, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.STDOUT
    )
    stdout, _ = await proc.communicate()
    return proc.returncode, stdout.decode(errors="replace")


def _remove_path(path: Path) -> None:
    """Delete a file, symlink or directory tree if present."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as e:
        raise InstallationError(
            f"failed to remove {path}: {e}", details={"path": str(path)}
        ) from e


def _ensure_dir(path: Path, label: str) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallationError(
            f"failed to create {label} directory {path}: {e}", details={"path": str(path)}
        ) from e


def _move(src: Path, dst: Path, label: str) -> None:
    logger.debug("Moving", src=str(src), dst=str(dst))
    try:
        shutil.move(str(src), str(dst))
    except OSError as e:
        raise InstallationError(
            f"failed to install {label}: {e}",
            details={"source": str(src), "destination": str(dst)},
        ) from e


async def extract_archive(archive: Path, dest: Path) -> Path:
    """Extract ``archive`` into a clean ``dest`` directory."""
    logger.info("Extracting", archive=str(archive), dest=str(dest))

    # leftovers from an earlier extraction would mix with this release
    _remove_path(dest)
    _ensure_dir(dest, "extraction")

    cmd = tar_command(archive, dest)
    logger.debug("Running tar", cmd=cmd)
    try:
        returncode, output = await async_subprocess_run(*cmd)
    except OSError as e:
        raise ExtractionError(str(archive), -1, str(e)) from e

    if returncode != 0:
        logger.debug(
            "Extraction failed", archive=str(archive), returncode=returncode, output=output
        )
        raise ExtractionError(str(archive), returncode, output)

    logger.debug("Archive extracted", archive=str(archive), extracted_to=str(dest))
    return dest


def install_files(config: RunConfig, tool_name: str = TOOL_NAME) -> Tuple[Path, Path]:
    """Move the extracted binary and library tree into their final directories.

    Whatever was installed before is removed first. Nothing is rolled back
    if a later step fails.
    """
    _ensure_dir(config.bin_dir, "bin")
    _ensure_dir(config.lib_dir, "lib")

    binary_dst = config.bin_dir / tool_name
    lib_dst = config.lib_dir / tool_name

    logger.info("Installing", binary=str(binary_dst), lib=str(lib_dst))
    _remove_path(binary_dst)
    _remove_path(lib_dst)

    binary_src = config.dest / tool_name
    if not binary_src.is_file():
        raise InstallationError(
            f"{tool_name} binary not found in {config.dest}",
            details={"path": str(binary_src)},
        )
    _move(binary_src, binary_dst, f"{tool_name} binary")

    lib_src = config.dest / LIB_SUBDIR
    try:
        os.listdir(lib_src)
    except OSError as e:
        raise InstallationError(
            f"failed to read lib directory {lib_src}: {e}",
            details={"path": str(lib_src)},
        ) from e
    _move(lib_src, lib_dst, f"{tool_name} libraries")

    return binary_dst, lib_dst


def cleanup(config: RunConfig) -> None:
    """Remove the downloaded archive and the scratch directory, best effort."""
    logger.info("Cleaning up", tar_dest=str(config.tar_dest), dest=str(config.dest))
    for path in (config.tar_dest, config.dest):
        try:
            _remove_path(path)
        except InstallationError as e:
            logger.warning("Cleanup failed", path=str(path), error=str(e))
