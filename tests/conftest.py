import io
import logging
import stat
import tarfile
import zipfile

import pytest

from ghinst.internal.constants import ENV_API_URL, ENV_INSTALL_ROOT, ENV_LOG_FILE, ENV_LOG_LEVEL, ENV_TOKEN


# --- Environment isolation ---

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's own ghinst / GitHub settings out of every test."""
    for name in (ENV_INSTALL_ROOT, ENV_TOKEN, ENV_LOG_LEVEL, ENV_LOG_FILE, ENV_API_URL):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def install_root(tmp_path):
    root = tmp_path / "ghinst"
    root.mkdir()
    return root


# --- Archive builders ---

@pytest.fixture
def make_tar():
    """
    Build a compressed tar archive in memory.

    Entries are (name, content, mode) tuples. A name ending in "/" is a
    directory; a content of the form ("symlink", target) is a symlink.
    """
    def _make(entries, compression="gz"):
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode=f"w:{compression}") as tf:
            for name, content, mode in entries:
                info = tarfile.TarInfo(name.rstrip("/"))
                info.mode = mode
                if name.endswith("/"):
                    info.type = tarfile.DIRTYPE
                    tf.addfile(info)
                elif isinstance(content, tuple) and content[0] == "symlink":
                    info.type = tarfile.SYMTYPE
                    info.linkname = content[1]
                    tf.addfile(info)
                else:
                    info.size = len(content)
                    tf.addfile(info, io.BytesIO(content))
        return buf.getvalue()

    return _make


@pytest.fixture
def make_zip():
    """
    Build a zip archive in memory.

    Entries are (name, content, mode) tuples. A mode of None writes the entry
    the way Windows tooling does: no Unix permission bits at all.
    """
    def _make(entries):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            for name, content, mode in entries:
                info = zipfile.ZipInfo(name)
                if mode is None:
                    info.create_system = 0
                    info.external_attr = 0x10 if name.endswith("/") else 0
                else:
                    info.create_system = 3
                    file_type = stat.S_IFDIR if name.endswith("/") else stat.S_IFREG
                    info.external_attr = (file_type | mode) << 16
                zf.writestr(info, content)
        return buf.getvalue()

    return _make


# --- Logging isolation ---

@pytest.fixture(autouse=True)
def reset_logging():
    """CLI runs configure logging against a captured stderr; drop it afterwards."""
    yield
    from ghinst.internal import logging as ghinst_logging

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
        handler.close()
    ghinst_logging._LOGGING_CONFIGURED = False
