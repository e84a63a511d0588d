"""
Error taxonomy for ghinst.

Every failure the installer can report is a subclass of GhinstError, so the
CLI layer has a single place to turn errors into exit codes.
"""
from typing import Sequence

from ghinst.kernel.contracts import Asset


class GhinstError(Exception):
    """Base class for all ghinst failures."""


class InvalidTargetError(GhinstError, ValueError):
    """The owner/repo[@tag] specifier is malformed."""


class ReleaseNotFoundError(GhinstError):
    """No release (or no release with the requested tag) exists upstream."""


class UpstreamError(GhinstError):
    """The release registry or download host answered with a failure."""


class UnsupportedPlatformError(GhinstError):
    """The OS or architecture is not in the alias table."""


class NoMatchingAssetError(GhinstError):
    """No release asset matches the platform and archive filter."""

    def __init__(self, message: str, assets: Sequence[Asset] = ()):
        super().__init__(message)
        self.assets = tuple(assets)


class UnsupportedArchiveError(GhinstError):
    """The payload cannot be parsed as the format implied by its name."""


class NoExecutableFoundError(GhinstError):
    """The archive parsed but holds no suitable executable entry."""


class InstallError(GhinstError):
    """Writing, linking or purging on the local filesystem failed."""
