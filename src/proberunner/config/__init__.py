"""
Configuration management for proberunner.

Supports multiple configuration sources in order of priority:
1. Environment variables (highest priority)
2. ~/.proberunner/.env
3. Global config file (~/.proberunner/config.yml)
4. Default values (lowest priority)
"""

from .env_loader import (
    global_config_dir,
    load_data_dir_env,
    load_env_file,
    load_global_config,
)
from .getters import (
    CONFIG_PATHS,
    get_bool,
    get_config,
    get_data_dir,
    get_db_url,
    get_follow_redirects,
    get_history_limit,
    get_run_defaults,
    get_user_agent,
    get_verbose,
    get_verify_ssl,
    parse_bool,
)
from .paths import (
    DB_FILENAME,
    create_global_config,
    ensure_data_dir,
    get_db_path,
    get_results_dir,
)

__all__ = [
    # env_loader
    "global_config_dir",
    "load_data_dir_env",
    "load_env_file",
    "load_global_config",
    # getters
    "CONFIG_PATHS",
    "get_bool",
    "get_config",
    "get_data_dir",
    "get_db_url",
    "get_follow_redirects",
    "get_history_limit",
    "get_run_defaults",
    "get_user_agent",
    "get_verbose",
    "get_verify_ssl",
    "parse_bool",
    # paths
    "DB_FILENAME",
    "create_global_config",
    "ensure_data_dir",
    "get_db_path",
    "get_results_dir",
]
