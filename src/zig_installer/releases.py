"""Release index retrieval and artifact lookup."""
import asyncio
from typing import Any, List, Optional

import aiohttp

from zig_installer.constants import SHASUM_FIELD, TARBALL_FIELD
from zig_installer.errors import FormatError, NetworkError, NotFoundError
from zig_installer.logging import get_logger
from zig_installer.sessions import create_session
from zig_installer.types import ArtifactDescriptor, ReleaseIndex

logger = get_logger(__name__)


async def fetch_index(
    url: str, session: Optional[aiohttp.ClientSession] = None
) -> ReleaseIndex:
    """Download and decode the release index document."""
    if session is None:
        async with create_session() as own_session:
            return await fetch_index(url, own_session)

    logger.info("Fetching release index", url=url)
    try:
        async with session.get(url) as response:
            if not 200 <= response.status < 300:
                logger.debug(
                    "Index request failed",
                    url=url,
                    status=response.status,
                    reason=response.reason,
                )
                raise NetworkError(url, status=response.status)

            try:
                index = await response.json(content_type=None)
            except ValueError as e:
                raise FormatError(
                    f"failed to parse index from {url}: {e}", details={"url": url}
                ) from e

    except asyncio.TimeoutError as e:
        logger.debug("Index request timed out", url=url)
        raise NetworkError(url, cause="timed out") from e
    except aiohttp.ClientError as e:
        logger.debug("Index request failed", url=url, error=str(e))
        raise NetworkError(url, cause=str(e) or e.__class__.__name__) from e

    if not isinstance(index, dict):
        raise FormatError(
            f"index at {url} is not an object", details={"url": url}
        )

    logger.debug("Release index loaded", url=url, versions=len(index))
    return index


def available_platforms(index: ReleaseIndex, version: str) -> List[str]:
    """List platform keys of ``version`` that carry an artifact object."""
    entry = index.get(version)
    if not isinstance(entry, dict):
        return []
    return sorted(
        key for key, value in entry.items()
        if isinstance(value, dict) and TARBALL_FIELD in value
    )


def _string_field(release: Any, field: str, version: str, platform: str) -> str:
    value = release.get(field)
    if not isinstance(value, str):
        raise FormatError(
            f"invalid {field} in index for {version} on {platform}",
            details={"version": version, "platform": platform, "field": field},
        )
    return value


def resolve_artifact(
    index: ReleaseIndex, version: str, platform: str
) -> ArtifactDescriptor:
    """Find the tarball URL and checksum for ``version`` on ``platform``.

    Lookups are exact: there is no fallback to a more generic platform.
    """
    if version not in index:
        raise NotFoundError(version)

    version_info = index[version]
    if not isinstance(version_info, dict):
        raise FormatError(
            f"index entry for version {version} is not an object",
            details={"version": version},
        )

    if platform not in version_info:
        raise NotFoundError(
            version, platform, available=available_platforms(index, version)
        )

    release = version_info[platform]
    if not isinstance(release, dict):
        raise FormatError(
            f"index entry for {version} on {platform} is not an object",
            details={"version": version, "platform": platform},
        )

    artifact = ArtifactDescriptor(
        tarball=_string_field(release, TARBALL_FIELD, version, platform),
        shasum=_string_field(release, SHASUM_FIELD, version, platform),
    )
    logger.debug(
        "Resolved artifact",
        version=version,
        platform=platform,
        tarball=artifact.tarball,
        shasum=artifact.shasum,
    )
    return artifact
