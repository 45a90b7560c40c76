"""Archive download with local reuse and verification."""
import asyncio
from pathlib import Path
from typing import Optional

import aiohttp

from zig_installer import checksum
from zig_installer.constants import CHUNK_SIZE
from zig_installer.errors import ChecksumError, InstallationError, NetworkError
from zig_installer.logging import get_logger
from zig_installer.sessions import create_session
from zig_installer.types import ArtifactDescriptor, RunConfig

logger = get_logger(__name__)


def _write_error(dest: Path, e: OSError) -> InstallationError:
    return InstallationError(f"failed to write {dest}: {e}", details={"path": str(dest)})


async def download_file(
    url: str, dest: Path, session: Optional[aiohttp.ClientSession] = None
) -> int:
    """Stream ``url`` into ``dest`` and return the number of bytes written.

    A partially written file is left behind on failure.
    """
    if session is None:
        async with create_session() as own_session:
            return await download_file(url, dest, own_session)

    logger.info("Starting download", url=url, destination=str(dest))
    try:
        async with session.get(url) as response:
            if not 200 <= response.status < 300:
                logger.debug(
                    "Download request failed",
                    url=url,
                    status=response.status,
                    reason=response.reason,
                )
                raise NetworkError(url, status=response.status)

            size = int(response.headers.get("content-length", 0))
            downloaded = 0

            try:
                f = open(dest, "wb")
            except OSError as e:
                raise _write_error(dest, e) from e

            with f:
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    try:
                        f.write(chunk)
                    except OSError as e:
                        raise _write_error(dest, e) from e
                    downloaded += len(chunk)

    except asyncio.TimeoutError as e:
        logger.debug("Download timed out", url=url)
        raise NetworkError(url, cause="timed out") from e
    except aiohttp.ClientError as e:
        logger.debug("Download failed", url=url, error=str(e))
        raise NetworkError(url, cause=str(e) or e.__class__.__name__) from e

    logger.info("Download complete", url=url, size=downloaded, expected_size=size)
    return downloaded


def _reuse_existing(path: Path, expected: str) -> bool:
    if not path.exists():
        return False
    if not path.is_file():
        raise InstallationError(
            f"{path} exists and is not a regular file", details={"path": str(path)}
        )

    logger.info("Found existing file, checking checksum", path=str(path))
    try:
        checksum.verify(path, expected)
    except ChecksumError as e:
        logger.warning(
            "Existing file has incorrect checksum, will download fresh copy",
            path=str(path),
            expected=e.expected,
            computed=e.actual,
        )
        _remove(path)
        return False

    logger.info("Existing file matches checksum, skipping download", path=str(path))
    return True


def _remove(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise InstallationError(
            f"failed to remove {path}: {e}", details={"path": str(path)}
        ) from e


async def ensure_artifact(
    config: RunConfig,
    artifact: ArtifactDescriptor,
    session: Optional[aiohttp.ClientSession] = None,
) -> bool:
    """Make sure a verified archive sits at ``config.tar_dest``.

    Returns True when the archive had to be downloaded.
    """
    dest = config.tar_dest
    if _reuse_existing(dest, artifact.shasum):
        return False

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallationError(
            f"failed to create tarball directory {dest.parent}: {e}",
            details={"path": str(dest.parent)},
        ) from e

    try:
        await download_file(artifact.tarball, dest, session)
    except (NetworkError, InstallationError):
        _remove(dest)
        raise

    logger.info("Verifying checksum", path=str(dest))
    try:
        checksum.verify(dest, artifact.shasum)
    except ChecksumError:
        _remove(dest)
        raise

    return True
