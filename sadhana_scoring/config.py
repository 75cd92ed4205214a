"""
Central configuration for data paths and runtime settings.

Local files (the JSON configuration store, logs) live in ~/.sadhana-scoring/.

Configure via environment variables (a .env file is honoured):
  - SADHANA_DATA_DIR (default: ~/.sadhana-scoring)
  - SADHANA_CONFIG_STORE (default: <data dir>/config_store.json)
  - SADHANA_LOG_LEVEL (default: INFO)
  - SADHANA_MAX_WORKERS (default: 8)
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def get_data_dir() -> Path:
    """
    Get the local data directory path.

    Uses SADHANA_DATA_DIR environment variable if set, otherwise defaults
    to ~/.sadhana-scoring/

    Returns:
        Path to data directory
    """
    env_path = os.environ.get("SADHANA_DATA_DIR")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path.home() / ".sadhana-scoring"


def get_config_store_path() -> Path:
    """Get the JSON configuration store file."""
    env_path = os.environ.get("SADHANA_CONFIG_STORE")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return get_data_dir() / "config_store.json"


def get_log_dir() -> Path:
    """Get the log file directory."""
    return get_data_dir() / "logs"


def get_log_level() -> str:
    return os.environ.get("SADHANA_LOG_LEVEL", "INFO").upper()


def get_max_workers() -> int:
    """Worker count for group progress fan-out (falls back to 8 on bad values)."""
    raw = os.environ.get("SADHANA_MAX_WORKERS", "8")
    try:
        return max(1, int(raw))
    except ValueError:
        return 8
