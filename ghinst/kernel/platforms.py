"""
Platform alias table and host platform detection.

Each canonical OS / architecture id maps to the lowercase phrases that may
appear in a release asset name to denote it.
"""
import platform
from types import MappingProxyType
from typing import Optional

from ghinst.kernel.contracts import PlatformKey

OS_ALIASES = MappingProxyType({
    "linux": ("linux",),
    "darwin": ("darwin", "macos", "osx"),
    "windows": ("windows", "win"),
})

ARCH_ALIASES = MappingProxyType({
    "amd64": ("amd64", "x86_64"),
    "arm64": ("arm64", "aarch64"),
    "386": ("386", "i386", "i686"),
})

# platform.system() / platform.machine() spellings -> canonical ids
_SYSTEM_NAMES = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "windows",
}

_MACHINE_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "armv8l": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}


def os_phrases(os_name: str) -> Optional[tuple[str, ...]]:
    return OS_ALIASES.get(os_name)


def arch_phrases(arch: str) -> Optional[tuple[str, ...]]:
    return ARCH_ALIASES.get(arch)


def normalize_os(system: str) -> str:
    s = system.lower()
    return _SYSTEM_NAMES.get(s, s)


def normalize_arch(machine: str) -> str:
    m = machine.lower()
    return _MACHINE_NAMES.get(m, m)


def current_platform() -> PlatformKey:
    """
    The running host as a PlatformKey.

    Unknown systems pass through lowercased; the selector rejects them with
    UnsupportedPlatformError.
    """
    return PlatformKey(
        os=normalize_os(platform.system()),
        arch=normalize_arch(platform.machine()),
    )
