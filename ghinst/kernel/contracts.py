"""
Data contracts shared by the kernel and its adapters.

These are pure data containers with no I/O. Adapters build them from wire
formats (GitHub JSON, CLI arguments) and the kernel operates on them.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Asset:
    """
    A single downloadable file attached to a release.
    `name` is untrusted text and the only signal used for matching.
    """
    name: str
    url: str
    size: int = 0


@dataclass(frozen=True)
class Release:
    tag_name: str
    assets: tuple[Asset, ...] = field(default_factory=tuple)

    @property
    def asset_names(self) -> list[str]:
        return [a.name for a in self.assets]


@dataclass(frozen=True)
class PlatformKey:
    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


@dataclass(frozen=True)
class ExtractedPayload:
    file_name: str
    content: bytes


@dataclass(frozen=True)
class InstallTarget:
    owner: str
    repo: str
    tag: Optional[str] = None

    def __str__(self) -> str:
        slug = f"{self.owner}/{self.repo}"
        return f"{slug}@{self.tag}" if self.tag else slug
