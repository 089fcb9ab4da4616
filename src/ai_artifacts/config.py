"""
Configuration: a JSON file under ``~/.ai-artifacts`` plus environment overrides.

  ARTIFACTS_CONFIG_DIR   directory holding config.json and preferences.json
  ARTIFACTS_BASE_URL     base URL of the app serving /api/chat and /api/sandbox
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from ai_artifacts.transport.http import DEFAULT_BASE_URL

CONFIG_DIR_ENV = "ARTIFACTS_CONFIG_DIR"
BASE_URL_ENV = "ARTIFACTS_BASE_URL"


def config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    return Path(override) if override else Path.home() / ".ai-artifacts"


def config_file() -> Path:
    return config_dir() / "config.json"


def preferences_file() -> Path:
    return config_dir() / "preferences.json"


def load_config() -> dict[str, Any]:
    try:
        data = json.loads(config_file().read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(cfg: dict[str, Any]) -> None:
    path = config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, indent=2))


def resolve_base_url(explicit: Optional[str] = None, cfg: Optional[dict[str, Any]] = None) -> str:
    """Explicit value, then the environment, then the config file, then the default."""
    if explicit:
        return explicit
    env = os.environ.get(BASE_URL_ENV)
    if env:
        return env
    cfg = load_config() if cfg is None else cfg
    return cfg.get("base_url") or DEFAULT_BASE_URL
