"""Error types for the installer."""
import logging
from typing import Any, Dict, Optional

from zig_installer.logging import get_logger


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger=None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with context."""
    logger = logger or get_logger(__name__)

    error_info: Dict[str, Any] = {
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }
    if context:
        error_info["context"] = context
    if isinstance(error, InstallerError):
        error_info["kind"] = error.kind
        error_info["details"] = error.details

    logger.log(level, "Install failed", **error_info)


class InstallerError(Exception):
    """Base error class for the installer."""

    kind = "internal"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class PreconditionError(InstallerError):
    """Required external tool is missing."""

    kind = "precondition"

    def __init__(self, tool: str):
        super().__init__(f"missing dependency: {tool}", details={"tool": tool})


class NetworkError(InstallerError):
    """HTTP request failed or returned a non-success status."""

    kind = "network"

    def __init__(
        self,
        url: str,
        status: Optional[int] = None,
        cause: Optional[str] = None,
    ):
        if status is not None:
            message = f"request to {url} failed: HTTP {status}"
        else:
            message = f"request to {url} failed: {cause}"
        super().__init__(message, details={"url": url, "status": status, "cause": cause})
        self.url = url
        self.status = status


class FormatError(InstallerError):
    """Release index is malformed."""

    kind = "format"


class NotFoundError(InstallerError):
    """Requested version or platform is not in the release index."""

    kind = "not_found"

    def __init__(self, version: str, platform: Optional[str] = None, **details: Any):
        if platform is None:
            message = f"version {version} not found in index"
        else:
            message = f"no release found for platform {platform} and version {version}"
        super().__init__(message, details={"version": version, "platform": platform, **details})
        self.version = version
        self.platform = platform


class ChecksumError(InstallerError):
    """Computed digest does not match the expected one."""

    kind = "checksum"

    def __init__(self, path: str, expected: str, actual: str):
        super().__init__(
            f"checksum mismatch for {path}: expected {expected}, got {actual}",
            details={"path": path, "expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class ExtractionError(InstallerError):
    """Archive tool exited with a nonzero status."""

    kind = "extraction"

    def __init__(self, archive: str, returncode: int, output: str):
        super().__init__(
            f"tar extraction of {archive} failed with code {returncode}: {output.strip()}",
            details={"archive": archive, "returncode": returncode, "output": output},
        )
        self.returncode = returncode
        self.output = output


class InstallationError(InstallerError):
    """Filesystem operation failed or expected files are missing."""

    kind = "installation"
