"""
Asset selection: pick the one release asset built for a given platform.
"""
from typing import Iterable, Sequence

from ghinst.kernel import platforms
from ghinst.kernel.contracts import Asset
from ghinst.kernel.errors import NoMatchingAssetError, UnsupportedPlatformError

ARCHIVE_EXTENSIONS = (".tar.gz", ".tgz", ".tar.bz2", ".tar.xz", ".zip")


def is_archive(name: str) -> bool:
    return name.lower().endswith(ARCHIVE_EXTENSIONS)


def matches_any(text: str, phrases: Iterable[str]) -> bool:
    return any(p in text for p in phrases)


def platform_phrases(os_name: str, arch: str) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """
    Return the (OS, arch) match phrases, or raise UnsupportedPlatformError
    when either key is not in the alias table.
    """
    os_keys = platforms.os_phrases(os_name)
    if os_keys is None:
        raise UnsupportedPlatformError(f"unsupported OS: {os_name}")

    arch_keys = platforms.arch_phrases(arch)
    if arch_keys is None:
        raise UnsupportedPlatformError(f"unsupported architecture: {arch}")

    return os_keys, arch_keys


def select_asset(assets: Sequence[Asset], os_name: str, arch: str) -> Asset:
    """
    Return the asset built for (os_name, arch).

    A candidate must mention the OS and the architecture somewhere in its
    lowercased name and end in a known archive extension. The shortest
    candidate name wins, which drops companions such as `.sha256` or
    `.sbom.json` files; equal lengths keep release order.

    Raises:
        UnsupportedPlatformError: os_name or arch is not in the alias table.
        NoMatchingAssetError: no asset passes the filter.
    """
    os_keys, arch_keys = platform_phrases(os_name, arch)

    candidates = []
    for asset in assets:
        lower = asset.name.lower()
        if matches_any(lower, os_keys) and matches_any(lower, arch_keys) and is_archive(lower):
            candidates.append(asset)

    if not candidates:
        raise NoMatchingAssetError(f"no asset found for {os_name}/{arch}", assets)

    # min() keeps the first of equally short names
    return min(candidates, key=lambda a: len(a.name))
