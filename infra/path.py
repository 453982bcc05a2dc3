# infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "SitePlan"
COMPANY_NAME = "SitePlan"


def user_data_dir() -> Path:
    """
    Returns a per-user data directory, e.g.:

    Windows:
        C:\\Users\\<User>\\AppData\\Roaming\\SitePlan\\SitePlan

    macOS:
        ~/Library/Application Support/SitePlan/SitePlan

    Linux:
        ~/.local/share/SitePlan/SitePlan
    """
    try:
        if sys.platform.startswith("win"):
            base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
        elif sys.platform == "darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))

        path = base / COMPANY_NAME / APP_NAME
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError:
        # Last-resort fallback: use home directory
        fallback = Path.home() / f".{APP_NAME.lower()}"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def default_db_path() -> Path:
    """The SQLite file holding tasks and dependency edges."""
    return user_data_dir() / "siteplan.db"
