"""Installer defaults and naming constants."""

TOOL_NAME = "zig"
ENV_PREFIX = "ZIG_"

# Release index
DEFAULT_INDEX_URL = "https://ziglang.org/download/index.json"
DEFAULT_VERSION = "master"

# Filesystem locations
DEFAULT_TAR_DEST = f"/tmp/{TOOL_NAME}.tar.xz"
DEFAULT_DEST = f"/tmp/{TOOL_NAME}"
DEFAULT_BIN_DIR = "/usr/local/bin"
DEFAULT_LIB_DIR = "/usr/local/lib"

# Name of the library tree inside an extracted release
LIB_SUBDIR = "lib"

# Artifact fields in the release index
TARBALL_FIELD = "tarball"
SHASUM_FIELD = "shasum"

# External tools that must be on PATH before anything runs
REQUIRED_TOOLS = ("tar",)

XZ_SUFFIX = ".tar.xz"
CHUNK_SIZE = 64 * 1024  # 64 KiB
