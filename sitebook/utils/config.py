# Rev 0.1.0
# sitebook/utils/config.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional
from .paths import config_dir

SETTINGS_FILE_NAME = "settings.json"

_DEFAULTS: Dict[str, Any] = {
    "main_window": {
        "width": 1200,
        "height": 760,
    },
    "ui": {
        "diagnostics_dock_visible": True,
        "recent_activity_limit": 5,
    },
    "store": {
        "storage_key": "constructionAppData",
        "roles": ["admin", "readonly"],
        "readonly_roles": ["readonly"],
        "default_role": "admin",
        "seed_sample_data": True,
        "sync_delay_ms": 2000,
    },
}

_log = logging.getLogger("sitebook.config")


def defaults() -> Dict[str, Any]:
    return json.loads(json.dumps(_DEFAULTS))


def settings_file() -> Path:
    return config_dir() / SETTINGS_FILE_NAME


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """Top-level sections from disk win over defaults (shallow merge)."""
    path = path or settings_file()
    if path.exists():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            _log.warning("Unreadable settings file %s (%s); using defaults", path, e)
            return defaults()
        if not isinstance(loaded, dict):
            _log.warning("Settings file %s is not a JSON object; using defaults", path)
            return defaults()
        return {**defaults(), **loaded}
    return defaults()


def save_settings(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or settings_file()
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
