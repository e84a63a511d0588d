import os
from pathlib import Path
from typing import Optional

from ghinst.internal.constants import BIN_DIR_NAME, ENV_INSTALL_ROOT, VERSION_SEPARATOR


# ---------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------

def get_default_install_root() -> Path:
    """
    Returns the default install root.

    - Windows: %LOCALAPPDATA%\\ghinst
    - Linux/macOS: ~/.local/ghinst
    """
    if os.name == "nt":  # Windows
        base = os.environ.get("LOCALAPPDATA", str(Path.home()))
        return Path(base) / "ghinst"
    return Path.home() / ".local" / "ghinst"


def get_install_root(override: Optional[Path] = None) -> Path:
    """
    Resolve the install root: explicit override, then $GHINST_ROOT, then the default.
    """
    if override:
        return Path(override).expanduser()

    env_root = os.environ.get(ENV_INSTALL_ROOT)
    if env_root:
        return Path(env_root).expanduser()

    return get_default_install_root()


def get_bin_dir(root: Path) -> Path:
    return root / BIN_DIR_NAME


# ---------------------------------------------------------------------
# Package layout
# ---------------------------------------------------------------------

def get_owner_dir(root: Path, owner: str) -> Path:
    return root / owner


# "%" goes first so already-escaped text in a tag stays distinct
_TAG_ESCAPES = (("%", "%25"), ("/", "%2F"), ("\\", "%5C"))


def escape_tag(tag: str) -> str:
    """
    Make a release tag usable as part of one directory name.

    Monorepo tags such as `cli/v1.0.0` would otherwise nest directories.
    """
    for raw, escaped in _TAG_ESCAPES:
        tag = tag.replace(raw, escaped)
    return tag


def get_version_dir(root: Path, owner: str, repo: str, tag: str) -> Path:
    """
    Directory holding one installed version: <root>/<owner>/<repo>@<escaped tag>
    """
    return get_owner_dir(root, owner) / f"{repo}{VERSION_SEPARATOR}{escape_tag(tag)}"


def get_link_path(root: Path, file_name: str) -> Path:
    return get_bin_dir(root) / file_name
