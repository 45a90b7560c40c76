"""Platform detection and mapping."""
import platform
from typing import Dict, Optional

# Architecture names as reported by Go, Python or Windows mapped to the
# names used by the release index. Anything not listed passes through.
ARCH_ALIASES: Dict[str, str] = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "386": "x86",
    "i386": "x86",
    "i686": "x86",
    "arm64": "aarch64",
}

OS_ALIASES: Dict[str, str] = {
    "darwin": "macos",
}


def normalize_arch(arch: str) -> str:
    return ARCH_ALIASES.get(arch.lower(), arch)


def normalize_os(os_name: str) -> str:
    return OS_ALIASES.get(os_name.lower(), os_name)


def platform_key(arch: str, os_name: str) -> str:
    """Build the ``<arch>-<os>`` key used by the release index."""
    return f"{normalize_arch(arch)}-{normalize_os(os_name)}"


def detect_platform(machine: Optional[str] = None, system: Optional[str] = None) -> str:
    """Get the platform key of the running host."""
    if machine is None:
        machine = platform.machine()
    if system is None:
        system = platform.system()

    return platform_key(machine.lower(), system.lower())
