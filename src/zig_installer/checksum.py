"""Archive integrity verification."""
import hashlib
from pathlib import Path

from zig_installer.constants import CHUNK_SIZE
from zig_installer.errors import ChecksumError, InstallationError
from zig_installer.logging import get_logger

logger = get_logger(__name__)


def compute_digest(path: Path, chunk_size: int = CHUNK_SIZE) -> str:
    """Compute SHA-256 hash of a file, reading it in bounded chunks."""
    sha256_hash = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for byte_block in iter(lambda: f.read(chunk_size), b""):
                sha256_hash.update(byte_block)
    except OSError as e:
        logger.debug("Failed to compute file hash", file=str(path), error=str(e))
        raise InstallationError(
            f"failed to read {path}: {e}", details={"path": str(path)}
        ) from e
    return sha256_hash.hexdigest()


def verify(path: Path, expected: str) -> None:
    """Raise ChecksumError unless the file's SHA-256 equals ``expected`` exactly."""
    actual = compute_digest(path)
    if actual != expected:
        logger.debug(
            "Checksum mismatch", file=str(path), expected=expected, computed=actual
        )
        raise ChecksumError(str(path), expected, actual)

    logger.debug("Checksum verified", file=str(path), hash=actual)
