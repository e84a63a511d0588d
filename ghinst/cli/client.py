"""
Thin client for the GitHub Releases API and asset downloads.
"""
from typing import Optional
from urllib.parse import quote

import requests
from pydantic import BaseModel, Field, ValidationError

from ghinst.internal.constants import (
    DOWNLOAD_CHUNK_SIZE,
    DOWNLOAD_TIMEOUT,
    GITHUB_ACCEPT,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    REQUEST_TIMEOUT,
)
from ghinst.internal.logging import get_logger
from ghinst.kernel.contracts import Asset, Release
from ghinst.kernel.errors import ReleaseNotFoundError, UpstreamError

logger = get_logger(__name__)


# ---------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------

class AssetPayload(BaseModel):
    name: str
    browser_download_url: str
    size: int = 0


class ReleasePayload(BaseModel):
    tag_name: str
    assets: list[AssetPayload] = Field(default_factory=list)

    def to_release(self) -> Release:
        return Release(
            tag_name=self.tag_name,
            assets=tuple(
                Asset(name=a.name, url=a.browser_download_url, size=a.size)
                for a in self.assets
            ),
        )


class ReleaseClient:
    """
    Looks up releases and downloads their assets.

    Requests are anonymous unless a token is given, in which case it is sent
    as a bearer credential on every request.
    """

    def __init__(self, api_url: str = GITHUB_API_URL, token: Optional[str] = None):
        self.api_url = api_url.rstrip("/")
        self._token = token

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def _headers(self, api: bool = False) -> dict:
        headers = {}
        if api:
            headers["Accept"] = GITHUB_ACCEPT
            headers["X-GitHub-Api-Version"] = GITHUB_API_VERSION
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def release_url(self, owner: str, repo: str, tag: Optional[str] = None) -> str:
        base = f"{self.api_url}/repos/{owner}/{repo}/releases"
        return f"{base}/tags/{quote(tag, safe='')}" if tag else f"{base}/latest"

    def fetch_release(self, owner: str, repo: str, tag: Optional[str] = None) -> Release:
        url = self.release_url(owner, repo, tag)
        logger.debug("Fetching release metadata", url=url)

        try:
            r = requests.get(url, headers=self._headers(api=True), timeout=REQUEST_TIMEOUT)
        except requests.RequestException as exc:
            raise UpstreamError(f"GitHub API request failed: {exc}") from exc

        if r.status_code == 404:
            raise ReleaseNotFoundError(f"release not found for {owner}/{repo}@{tag or 'latest'}")
        if r.status_code != 200:
            raise UpstreamError(f"GitHub API returned {r.status_code}")

        try:
            release = ReleasePayload.model_validate(r.json()).to_release()
        except (ValueError, ValidationError) as exc:
            raise UpstreamError(f"malformed release metadata from {url}: {exc}") from exc

        logger.info("Resolved release", owner=owner, repo=repo, tag=release.tag_name,
                    assets=len(release.assets))
        return release

    def download(self, url: str) -> bytes:
        logger.debug("Downloading asset", url=url)
        buffer = bytearray()

        try:
            with requests.get(url, headers=self._headers(), stream=True, timeout=DOWNLOAD_TIMEOUT) as r:
                if r.status_code != 200:
                    raise UpstreamError(f"download returned HTTP {r.status_code}")
                for chunk in r.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    buffer.extend(chunk)
        except requests.RequestException as exc:
            raise UpstreamError(f"download failed: {exc}") from exc

        logger.info("Downloaded asset", url=url, size=len(buffer))
        return bytes(buffer)

    def __repr__(self) -> str:
        return f"<ReleaseClient api_url={self.api_url}>"
