"""
Configuration for the post time limit check.

Config file: ~/.post-limit/config.json (directory overridable with POST_LIMIT_DATA_DIR)
API key searched in order:
1. config.json -> api_key
2. POST_LIMIT_API_KEY environment variable
"""
import json
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


DEFAULT_DATA_DIR = Path.home() / ".post-limit"

_DEFAULTS = {
    "database_url": None,
    "store_timezone": "UTC",
    "under_minute_phrase": "less than a minute",
    "api_base_url": None,
}


@dataclass
class LimitConfig:
    """Time limit configuration."""
    database_url: Optional[str] = None
    store_timezone: str = "UTC"
    under_minute_phrase: str = "less than a minute"
    api_base_url: Optional[str] = None
    api_key: Optional[str] = None


def get_data_dir() -> Path:
    """Get the data directory holding config.json and the default database."""
    return Path(os.environ.get("POST_LIMIT_DATA_DIR", DEFAULT_DATA_DIR)).expanduser()


def _load_json_file(path: Path) -> dict:
    """Load a JSON file, return empty dict if missing or invalid."""
    try:
        if path.exists():
            with open(path, "r") as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
    except (json.JSONDecodeError, OSError):
        pass
    return {}


def _find_api_key(config_data: dict) -> Optional[str]:
    if config_data.get("api_key"):
        return config_data["api_key"]
    return os.environ.get("POST_LIMIT_API_KEY") or None


def load_config() -> LimitConfig:
    """
    Load time limit configuration.

    Merges defaults with config file values, then applies
    POST_LIMIT_DATABASE_URL and POST_LIMIT_STORE_TIMEZONE overrides.
    """
    data = _load_json_file(get_data_dir() / "config.json")
    merged = {**_DEFAULTS, **data}

    database_url = os.environ.get("POST_LIMIT_DATABASE_URL") or merged.get("database_url")
    store_timezone = os.environ.get("POST_LIMIT_STORE_TIMEZONE") or merged.get("store_timezone")

    return LimitConfig(
        database_url=database_url,
        store_timezone=store_timezone or _DEFAULTS["store_timezone"],
        under_minute_phrase=merged.get("under_minute_phrase") or _DEFAULTS["under_minute_phrase"],
        api_base_url=merged.get("api_base_url"),
        api_key=_find_api_key(data),
    )
