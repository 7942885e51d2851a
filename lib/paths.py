from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "YAM_DASHBOARD_HOME"
APP_ENV_DB = "YAM_DASHBOARD_DB"


def project_root() -> Path:
    """
    Repository/project root directory.
    Contains lib/, api/, cli/, tests/.
    """
    return Path(__file__).parent.parent.resolve()


def app_home() -> Path:
    """
    User-writable home for the dashboard.
    Override with YAM_DASHBOARD_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".yam_dashboard").resolve()


def data_dir() -> Path:
    d = app_home() / "data"
    d.mkdir(parents=True, exist_ok=True)
    return d


def db_path() -> Path:
    """
    Canonical DB path.

    Resolution order:
    1. YAM_DASHBOARD_DB env var (explicit override)
    2. ~/.yam_dashboard/data/yam_dashboard.db (default)
    """
    if os.environ.get(APP_ENV_DB):
        return Path(os.environ[APP_ENV_DB]).expanduser().resolve()
    return data_dir() / "yam_dashboard.db"


def log_dir() -> Path:
    """Directory for rotated log files."""
    d = app_home() / "logs"
    d.mkdir(parents=True, exist_ok=True)
    return d
