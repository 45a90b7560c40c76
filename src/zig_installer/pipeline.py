"""End-to-end install flow."""
from typing import Optional

import aiohttp

from zig_installer.fetcher import ensure_artifact
from zig_installer.installer import check_dependencies, cleanup, extract_archive, install_files
from zig_installer.logging import get_logger
from zig_installer.platforms import detect_platform
from zig_installer.releases import fetch_index, resolve_artifact
from zig_installer.sessions import create_session
from zig_installer.types import InstallResult, RunConfig

logger = get_logger(__name__)


async def run_install(
    config: RunConfig,
    platform: Optional[str] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> InstallResult:
    """Install the configured release.

    Args:
        config: Resolved run configuration
        platform: Platform key to install for, the running host by default
        session: HTTP session to reuse for the index and archive requests

    Returns:
        Where the binary and library tree ended up

    Raises:
        InstallerError: On the first failing stage
    """
    check_dependencies()
    platform = platform or detect_platform()

    if session is None:
        async with create_session() as own_session:
            return await _install(config, platform, own_session)
    return await _install(config, platform, session)


async def _install(
    config: RunConfig, platform: str, session: aiohttp.ClientSession
) -> InstallResult:
    logger.info("Installing release", version=config.version, platform=platform)

    index = await fetch_index(config.index_url, session)
    artifact = resolve_artifact(index, config.version, platform)

    downloaded = await ensure_artifact(config, artifact, session)

    await extract_archive(config.tar_dest, config.dest)
    binary, lib = install_files(config)

    cleanup(config)

    logger.info(
        "Install complete",
        version=config.version,
        binary=str(binary),
        lib=str(lib),
        downloaded=downloaded,
    )
    return InstallResult(
        version=config.version,
        platform=platform,
        binary=binary,
        lib=lib,
        downloaded=downloaded,
    )
