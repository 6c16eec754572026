"""Configuration loader for the BrainGuard plugin.

Loads configuration from .jaato/brain_guard.json if it exists, then
applies the config dict passed to ``initialize()`` on top of it.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .prompt import DEFAULT_REMINDER_INTERVAL
from .storage import DEFAULT_STORAGE_PATH

logger = logging.getLogger(__name__)

# Default location for the config file
DEFAULT_CONFIG_PATH = ".jaato/brain_guard.json"

ENV_CONFIG_PATH = "JAATO_BRAIN_GUARD_CONFIG"


@dataclass
class BrainGuardConfig:
    """BrainGuard plugin settings.

    Attributes:
        enabled: When False the plugin exposes no tools and injects no prompts.
        reminder_interval: Inject a reminder every N turns of a session.
        storage_type: "file" (JSONL) or "memory".
        storage_path: JSONL file for file storage.
        embeddings_enabled: When False, no embedding provider is created.
        embedding_model: Embedding model override.
        embedding_timeout_ms: Transport timeout override for embedding calls.
        env_file: Optional .env file loaded before resolving credentials.
    """
    enabled: bool = True
    reminder_interval: int = DEFAULT_REMINDER_INTERVAL
    storage_type: str = "file"
    storage_path: str = DEFAULT_STORAGE_PATH
    embeddings_enabled: bool = True
    embedding_model: Optional[str] = None
    embedding_timeout_ms: Optional[int] = None
    env_file: Optional[str] = None


def _resolve_file_path(config_path: Optional[str], base_path: str) -> Path:
    if config_path:
        file_path = Path(config_path)
    elif os.environ.get(ENV_CONFIG_PATH):
        file_path = Path(os.environ[ENV_CONFIG_PATH])
    else:
        file_path = Path(DEFAULT_CONFIG_PATH)

    file_path = file_path.expanduser()
    if not file_path.is_absolute():
        file_path = Path(base_path) / file_path
    return file_path


def load_config_file(
    config_path: Optional[str] = None,
    base_path: Optional[str] = None
) -> Dict[str, Any]:
    """Read the raw config dict from a JSON file.

    Searches for config file in this order:
    1. Explicit config_path if provided
    2. JAATO_BRAIN_GUARD_CONFIG environment variable
    3. .jaato/brain_guard.json in base_path (or cwd)

    A missing file yields an empty dict. An unreadable or malformed file is
    logged and also yields an empty dict.

    Example config file (.jaato/brain_guard.json):
    ```json
    {
        "enabled": true,
        "reminder_interval": 10,
        "storage_type": "file",
        "storage_path": "~/.jaato/brain_guard/patterns.jsonl"
    }
    ```
    """
    base_path = base_path or os.getcwd()
    file_path = _resolve_file_path(config_path, base_path)

    if not file_path.exists():
        return {}

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load %s: %s", file_path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", file_path)
        return {}
    return data


def load_config(
    overrides: Optional[Dict[str, Any]] = None,
    base_path: Optional[str] = None
) -> BrainGuardConfig:
    """Build the effective configuration.

    Args:
        overrides: Config dict passed to the plugin's initialize(). May name
            the config file via "config_path"; its other keys win over the file.
        base_path: Base directory for relative paths (default: cwd).

    Returns:
        BrainGuardConfig with file values, then overrides, then defaults.

    Raises:
        ValueError: If a value has the wrong type or is out of range.
    """
    overrides = overrides or {}
    base_path = base_path or os.getcwd()

    data = load_config_file(overrides.get("config_path"), base_path)
    data.update({k: v for k, v in overrides.items() if k != "config_path"})
    return _parse_config(data, base_path)


def _get_bool(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _parse_config(data: Dict[str, Any], base_path: str) -> BrainGuardConfig:
    defaults = BrainGuardConfig()

    reminder_interval = data.get("reminder_interval", defaults.reminder_interval)
    if isinstance(reminder_interval, bool) or not isinstance(reminder_interval, int) or reminder_interval < 1:
        raise ValueError(f"reminder_interval must be a positive integer, got {reminder_interval!r}")

    storage_type = data.get("storage_type", defaults.storage_type)
    if storage_type not in ("file", "memory"):
        raise ValueError(f"storage_type must be 'file' or 'memory', got {storage_type!r}")

    # Relative storage paths are anchored at base_path; '~' paths are left alone
    storage_path = str(data.get("storage_path") or defaults.storage_path)
    if not storage_path.startswith("~") and not Path(storage_path).is_absolute():
        storage_path = str(Path(base_path) / storage_path)

    env_file = data.get("env_file")
    if env_file and not Path(env_file).expanduser().is_absolute():
        env_file = str(Path(base_path) / env_file)

    timeout_ms = data.get("embedding_timeout_ms")
    if timeout_ms is not None and (
        isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0
    ):
        raise ValueError(f"embedding_timeout_ms must be a positive integer, got {timeout_ms!r}")

    return BrainGuardConfig(
        enabled=_get_bool(data, "enabled", defaults.enabled),
        reminder_interval=reminder_interval,
        storage_type=storage_type,
        storage_path=storage_path,
        embeddings_enabled=_get_bool(data, "embeddings_enabled", defaults.embeddings_enabled),
        embedding_model=data.get("embedding_model"),
        embedding_timeout_ms=timeout_ms,
        env_file=env_file,
    )
