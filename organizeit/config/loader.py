from __future__ import annotations

import json
import os
import threading
from pathlib import Path

from organizeit.log import get_home_dir, logger

# Per-user overrides live next to the log file
_OVERRIDE_FILENAME = "config.json"

# In-memory config (loaded once, protected by lock)
_config = None
_config_lock = threading.Lock()

_ENV_OVERRIDES = {
    "ORGANIZEIT_STORE": ("store", "backend"),
    "ORGANIZEIT_DB_PATH": ("store", "db_path"),
}


def get_config() -> dict:
    """Get the effective config: defaults, then user overrides, then env vars.

    Double-check pattern ensures only one thread builds the config; after
    that the dict is never mutated, so the lock-free fast path is safe.
    """
    global _config

    if _config is not None:
        return _config

    with _config_lock:
        if _config is not None:
            return _config

        result = _load_defaults()

        overrides = _load_user_overrides()
        if overrides:
            result = _merge(result, overrides)

        result = _apply_env(result)
        _config = result
        return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() reloads. Mainly for testing."""
    global _config
    with _config_lock:
        _config = None


def get_metrics_config() -> dict:
    return get_config().get("metrics", {})


def get_store_config() -> dict:
    return get_config().get("store", {})


def get_api_config() -> dict:
    return get_config().get("api", {})


def _load_defaults() -> dict:
    try:
        defaults_path = Path(__file__).parent / "defaults.json"
        with open(defaults_path, "r") as f:
            return json.load(f)
    except Exception:
        logger.warning("Failed to load defaults.json, using minimal hardcoded config")
        return {
            "store": {"backend": "memory", "db_path": ""},
            "metrics": {},
            "chat": {},
            "audit": {},
            "api": {},
        }


def _load_user_overrides() -> dict | None:
    try:
        path = get_home_dir() / _OVERRIDE_FILENAME
        if not path.exists():
            return None
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            logger.warning("User config %s is not a JSON object, ignoring", path)
            return None
        return data
    except Exception:
        logger.warning("Failed to load user config override, ignoring", exc_info=True)
        return None


def _apply_env(config: dict) -> dict:
    result = config
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(var, "")
        if value:
            result = _merge(result, {section: {key: value}})
    return result


def _merge(base: dict, override: dict, depth: int = 0) -> dict:
    """Deep merge override into base. Override values win.

    Args:
        base: The base dict to merge into.
        override: The override dict whose values win on conflict.
        depth: Current recursion depth. Stops recursing at 10.
    """
    _MAX_MERGE_DEPTH = 10
    result = base.copy()
    for key, value in override.items():
        if key.startswith("_"):
            continue
        if (
            depth < _MAX_MERGE_DEPTH
            and key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = _merge(result[key], value, depth=depth + 1)
        else:
            result[key] = value
    return result
