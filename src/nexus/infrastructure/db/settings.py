from __future__ import annotations

import os
from pathlib import Path

DEFAULT_SAVE_DIR = "~/.nexus_chronicles"


def save_dir() -> Path:
    return Path(os.getenv("NEXUS_SAVE_DIR", DEFAULT_SAVE_DIR)).expanduser()


def database_url() -> str:
    configured = os.getenv("NEXUS_DATABASE_URL", "").strip()
    if configured:
        return configured
    return f"sqlite:///{save_dir() / 'nexus_saves.db'}"
