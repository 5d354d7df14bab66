"""Where publishstatus keeps files between runs.

Only the Edge response cache lives here at the moment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "publishstatus"
DATA_DIR_ENV: Final[str] = "PUBLISHSTATUS_DATA_DIR"
EDGE_CACHE_FILENAME: Final[str] = "edge_cache.sqlite"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    http_cache_filename: str = EDGE_CACHE_FILENAME

    def http_cache_path(self, *, create: bool = True) -> Path:
        data_dir = self.data_dir.expanduser().resolve()
        if create:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.http_cache_filename


def default_data_dir() -> Path:
    # LOCALAPPDATA on Windows, XDG data home elsewhere.
    if os.name == "nt":
        root = os.getenv("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        root = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(root) / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    configured = optional_env_var(DATA_DIR_ENV)
    return StorageConfig(data_dir=Path(configured) if configured else default_data_dir())
