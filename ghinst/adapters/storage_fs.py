"""
Filesystem placement of installed binaries.

Layout under the install root:

    <root>/<owner>/<repo>@<tag>/<binary>   one directory per installed version
    <root>/bin/<binary>                    symlink to the active version

A version directory's mtime is refreshed on every install and is the only
signal purge uses to decide which version is newest.
"""
import os
import shutil
import tempfile
from pathlib import Path

from ghinst.internal import paths
from ghinst.internal.constants import VERSION_SEPARATOR
from ghinst.internal.logging import get_logger
from ghinst.kernel.contracts import ExtractedPayload
from ghinst.kernel.errors import InstallError

logger = get_logger(__name__)

_BINARY_MODE = 0o755


class FileSystemInstaller:
    def __init__(self, root: Path):
        self.root = Path(root).expanduser().absolute()

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    def install(self, owner: str, repo: str, tag: str, payload: ExtractedPayload) -> Path:
        """
        Write the payload into its version directory and point the bin
        symlink at it. Returns the symlink path.

        On failure a version directory created by this call is removed so no
        half-written version is left behind. An existing version directory
        and the current bin symlink are left in place.
        """
        if payload.file_name in ("", ".", "..") or "/" in payload.file_name or "\\" in payload.file_name:
            raise InstallError(f"refusing to install unsafe file name {payload.file_name!r}")

        version_dir = paths.get_version_dir(self.root, owner, repo, tag)
        binary_path = version_dir / payload.file_name
        link_path = paths.get_link_path(self.root, payload.file_name)

        created = not version_dir.exists()
        try:
            version_dir.mkdir(parents=True, exist_ok=True)
            self._write_binary(binary_path, payload.content)
            os.utime(version_dir)

            link_path.parent.mkdir(parents=True, exist_ok=True)
            self._replace_symlink(link_path, binary_path)
        except OSError as exc:
            if created:
                logger.error("Install failed, rolling back", version_dir=str(version_dir), error=str(exc))
                shutil.rmtree(version_dir, ignore_errors=True)
            else:
                logger.error("Install failed, keeping existing version", version_dir=str(version_dir),
                             error=str(exc))
            raise InstallError(f"installing {payload.file_name}: {exc}") from exc

        logger.info("Installed binary", binary=str(binary_path), link=str(link_path))
        return link_path

    def _write_binary(self, target_path: Path, content: bytes) -> None:
        fd, temp_name = tempfile.mkstemp(dir=target_path.parent, prefix=f".{target_path.name}.", suffix=".tmp")
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            temp_path.chmod(_BINARY_MODE)
            temp_path.replace(target_path)
        finally:
            if temp_path.exists():
                temp_path.unlink()

    def _replace_symlink(self, link_path: Path, target_path: Path) -> None:
        # Build the new link beside the old one and rename it over, so the old
        # link survives any failure.
        temp_link = link_path.with_name(f".{link_path.name}.{os.getpid()}.tmp")
        if temp_link.is_symlink() or temp_link.exists():
            temp_link.unlink()

        temp_link.symlink_to(target_path)
        try:
            temp_link.replace(link_path)
        except OSError:
            temp_link.unlink()
            raise

    # ------------------------------------------------------------------
    # Purge
    # ------------------------------------------------------------------

    def list_versions(self, owner: str, repo: str) -> list[Path]:
        """
        Installed version directories of owner/repo, newest first.
        """
        owner_dir = paths.get_owner_dir(self.root, owner)
        if not owner_dir.is_dir():
            return []

        prefix = f"{repo}{VERSION_SEPARATOR}"
        versions = [
            p for p in owner_dir.iterdir()
            if p.is_dir() and not p.is_symlink() and p.name.startswith(prefix)
        ]
        return sorted(versions, key=lambda p: p.stat().st_mtime, reverse=True)

    def purge(self, owner: str, repo: str) -> list[Path]:
        """
        Remove every installed version of owner/repo except the newest.
        Returns the removed directories.
        """
        try:
            versions = self.list_versions(owner, repo)
        except OSError as exc:
            raise InstallError(f"listing versions of {owner}/{repo}: {exc}") from exc

        if len(versions) <= 1:
            logger.info("Nothing to purge", owner=owner, repo=repo, versions=len(versions))
            return []

        keep, *stale = versions
        logger.info("Keeping newest version", path=str(keep))

        removed = []
        for version_dir in stale:
            try:
                shutil.rmtree(version_dir)
            except OSError as exc:
                raise InstallError(f"removing {version_dir}: {exc}") from exc
            logger.info("Removed old version", path=str(version_dir))
            removed.append(version_dir)

        return removed
