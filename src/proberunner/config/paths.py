"""Data directory layout and global config creation."""

import logging
from pathlib import Path

import yaml

from .env_loader import global_config_dir
from .getters import get_data_dir

logger = logging.getLogger(__name__)

DB_FILENAME = "proberunner.db"
RESULTS_DIRNAME = "results"


def ensure_data_dir() -> Path:
    """Ensure the data directory exists and return it."""
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    """Get the SQLite database path."""
    return get_data_dir() / DB_FILENAME


def get_results_dir() -> Path:
    """Get the directory export files are written to."""
    return get_data_dir() / RESULTS_DIRNAME


def create_global_config() -> Path:
    """Create global config directory and file if they don't exist."""
    config_dir = global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    config_path = config_dir / "config.yml"
    if not config_path.exists():
        default_config = {
            "run": {
                "delay_ms": 500,
                "timeout_seconds": 10.0,
                "retries": 0,
            },
            "http": {
                "verify_ssl": True,
                "follow_redirects": False,
            },
            "storage": {
                "history_limit": 10,
            },
        }
        with open(config_path, "w") as f:
            yaml.dump(default_config, f, default_flow_style=False)
        logger.info("Created global config at %s", config_path)

    return config_path
