"""
Runtime configuration gathered from the environment once per invocation.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ghinst.internal import paths
from ghinst.internal.constants import (
    ENV_API_URL,
    ENV_LOG_FILE,
    ENV_LOG_LEVEL,
    ENV_TOKEN,
    GITHUB_API_URL,
)


@dataclass(frozen=True)
class Settings:
    install_root: Path
    token: Optional[str]
    api_url: str
    log_level: str
    log_file: Optional[Path]

    @classmethod
    def from_env(cls, install_root: Optional[Path] = None) -> "Settings":
        token = os.environ.get(ENV_TOKEN, "").strip() or None
        log_file = os.environ.get(ENV_LOG_FILE)

        return cls(
            install_root=paths.get_install_root(install_root),
            token=token,
            api_url=os.environ.get(ENV_API_URL, GITHUB_API_URL).rstrip("/"),
            log_level=os.environ.get(ENV_LOG_LEVEL, "WARNING").upper(),
            log_file=Path(log_file).expanduser() if log_file else None,
        )
