"""Configuration getter functions."""

import os
from pathlib import Path
from typing import Any

from .env_loader import global_config_dir, load_data_dir_env, load_global_config

# Where each key lives inside config.yml when it is not given as a flat key.
CONFIG_PATHS: dict[str, tuple[str, ...]] = {
    "PROBERUNNER_DATA_DIR": ("storage", "data_dir"),
    "PROBERUNNER_DB_URL": ("storage", "db_url"),
    "PROBERUNNER_VERBOSE": ("run", "verbose_log"),
    "PROBERUNNER_USER_AGENT": ("http", "user_agent"),
    "PROBERUNNER_VERIFY_SSL": ("http", "verify_ssl"),
    "PROBERUNNER_FOLLOW_REDIRECTS": ("http", "follow_redirects"),
    "PROBERUNNER_HISTORY_LIMIT": ("storage", "history_limit"),
}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def _lookup_path(config: dict[str, Any], path: tuple[str, ...]) -> Any:
    node: Any = config
    for part in path:
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def get_config(key: str, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. ~/.proberunner/.env file
    3. Global config file (flat key, then its section path)
    4. Default value

    Args:
        key: Configuration key
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    # 1. Check environment variable
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    # 2. Check .env file in the config directory
    env_config = load_data_dir_env()
    if key in env_config:
        return env_config[key]

    # 3. Check global config
    global_config = load_global_config()
    if key in global_config:
        return global_config[key]
    path = CONFIG_PATHS.get(key)
    if path:
        value = _lookup_path(global_config, path)
        if value is not None:
            return value

    # 4. Return default
    return default


def parse_bool(value: Any, default: bool = False) -> bool:
    """Interpret config values such as ``"true"``, ``"0"`` or ``True``."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return default


def get_bool(key: str, default: bool = False) -> bool:
    return parse_bool(get_config(key), default)


def get_data_dir() -> Path:
    """Get the data directory (default: ~/.proberunner)."""
    value = get_config("PROBERUNNER_DATA_DIR")
    return Path(value).expanduser() if value else global_config_dir()


def get_db_url() -> str | None:
    """Get an explicit SQLAlchemy database URL, if configured."""
    return get_config("PROBERUNNER_DB_URL")


def get_user_agent(default: str) -> str:
    return get_config("PROBERUNNER_USER_AGENT", default)


def get_verify_ssl() -> bool:
    return get_bool("PROBERUNNER_VERIFY_SSL", True)


def get_follow_redirects() -> bool:
    return get_bool("PROBERUNNER_FOLLOW_REDIRECTS", False)


def get_verbose(default: bool = True) -> bool:
    return get_bool("PROBERUNNER_VERBOSE", default)


def get_run_defaults() -> dict[str, Any]:
    """Return the ``run`` section of config.yml (empty if absent)."""
    section = load_global_config().get("run")
    return dict(section) if isinstance(section, dict) else {}


def get_history_limit(default: int = 10) -> int:
    """Number of runs kept in history (at least 1)."""
    value = get_config("PROBERUNNER_HISTORY_LIMIT", default)
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return default
