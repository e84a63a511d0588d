"""
Archive extraction: find the single executable payload inside a release asset.

The archive format is derived from the asset name only; content bytes are
never sniffed. Each format gets exactly one parse attempt.
"""
import io
import lzma
import posixpath
import stat
import tarfile
import zipfile
import zlib
from enum import Enum
from typing import Optional

from ghinst.internal.logging import get_logger
from ghinst.kernel.contracts import ExtractedPayload
from ghinst.kernel.errors import NoExecutableFoundError, UnsupportedArchiveError

logger = get_logger(__name__)

_EXEC_BITS = 0o111

# ZipInfo.create_system values whose external_attr carries a Unix mode
_UNIX_ZIP_CREATORS = (3, 19)  # Unix, macOS

# Errors a broken compressed stream can surface while it is being read
_STREAM_ERRORS = (tarfile.TarError, EOFError, OSError, zlib.error, lzma.LZMAError)
_ZIP_ERRORS = (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, OSError, zlib.error,
               NotImplementedError, RuntimeError)


class ArchiveKind(Enum):
    TAR_GZ = "tar.gz"
    TAR_BZ2 = "tar.bz2"
    TAR_XZ = "tar.xz"
    ZIP = "zip"
    RAW = "raw"

    @property
    def tar_mode(self) -> Optional[str]:
        return _TAR_MODES.get(self)


_TAR_MODES = {
    ArchiveKind.TAR_GZ: "r:gz",
    ArchiveKind.TAR_BZ2: "r:bz2",
    ArchiveKind.TAR_XZ: "r:xz",
}

_SUFFIXES = (
    (".tar.gz", ArchiveKind.TAR_GZ),
    (".tgz", ArchiveKind.TAR_GZ),
    (".tar.bz2", ArchiveKind.TAR_BZ2),
    (".tar.xz", ArchiveKind.TAR_XZ),
    (".zip", ArchiveKind.ZIP),
)


def classify_archive(name: str) -> ArchiveKind:
    lower = name.lower()
    for suffix, kind in _SUFFIXES:
        if lower.endswith(suffix):
            return kind
    return ArchiveKind.RAW


def base_name(path: str) -> str:
    return posixpath.basename(path.rstrip("/"))


def extract_binary(data: bytes, asset_name: str) -> ExtractedPayload:
    """
    Extract the executable from `data`, an asset named `asset_name`.

    Assets that are not a known archive are treated as the executable itself
    and returned unchanged under their own name.

    Raises:
        UnsupportedArchiveError: the bytes do not parse as the implied format.
        NoExecutableFoundError: the archive holds no suitable entry.
    """
    kind = classify_archive(asset_name)
    logger.debug("Extracting asset", asset=asset_name, kind=kind.value, size=len(data))

    if kind is ArchiveKind.RAW:
        return ExtractedPayload(file_name=asset_name, content=data)

    if kind is ArchiveKind.ZIP:
        payload = _find_in_zip(data, asset_name)
    else:
        payload = _find_in_tar(data, asset_name, kind.tar_mode)

    logger.info("Found executable in archive", asset=asset_name, binary=payload.file_name)
    return payload


# ---------------------------------------------------------------------
# Tar
# ---------------------------------------------------------------------

def _find_in_tar(data: bytes, asset_name: str, mode: str) -> ExtractedPayload:
    """
    Return the first regular file with any execute bit set, in stream order.
    """
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode=mode) as tf:
            for member in tf:
                if not member.isreg() or not member.mode & _EXEC_BITS:
                    continue

                extracted = tf.extractfile(member)
                content = extracted.read() if extracted is not None else b""
                return ExtractedPayload(file_name=base_name(member.name), content=content)

            if not _reached_end(tf):
                raise UnsupportedArchiveError(
                    f"cannot read {asset_name} as {mode[2:]} tar: invalid header at offset {tf.offset}"
                )
    except _STREAM_ERRORS as exc:
        raise UnsupportedArchiveError(f"cannot read {asset_name} as {mode[2:]} tar: {exc}") from exc

    raise NoExecutableFoundError(f"no executable found in archive {asset_name}")


def _reached_end(tf: tarfile.TarFile) -> bool:
    """
    tarfile stops iterating without an error on a bad header past the first
    member. The block it stopped at must be the zero end marker or end of data.
    """
    tf.fileobj.seek(tf.offset)
    block = tf.fileobj.read(tarfile.BLOCKSIZE)
    return not block.strip(b"\0")


# ---------------------------------------------------------------------
# Zip
# ---------------------------------------------------------------------

def _zip_mode(info: zipfile.ZipInfo) -> int:
    if info.create_system not in _UNIX_ZIP_CREATORS:
        return 0
    return info.external_attr >> 16


def _find_in_zip(data: bytes, asset_name: str) -> ExtractedPayload:
    """
    Return the first entry with an execute bit; failing that, the first entry
    whose base name has no extension.

    One pass: an executable entry returns immediately, even when a fallback
    was already recorded earlier in the listing.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            fallback: Optional[zipfile.ZipInfo] = None

            for info in zf.infolist():
                mode = _zip_mode(info)
                if info.is_dir() or stat.S_ISDIR(mode) or stat.S_ISLNK(mode):
                    continue

                if mode & _EXEC_BITS:
                    return ExtractedPayload(file_name=base_name(info.filename), content=zf.read(info))

                if fallback is None and "." not in base_name(info.filename):
                    fallback = info

            if fallback is not None:
                logger.debug("No executable bit in zip, using extensionless entry",
                             entry=fallback.filename)
                return ExtractedPayload(file_name=base_name(fallback.filename), content=zf.read(fallback))
    except _ZIP_ERRORS as exc:
        raise UnsupportedArchiveError(f"cannot read {asset_name} as zip: {exc}") from exc

    raise NoExecutableFoundError(f"no executable found in archive {asset_name}")
