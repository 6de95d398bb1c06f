"""User configuration for the cilo editor.

Settings are read from ``config.json`` in the user's config directory
(as reported by platformdirs). Missing or malformed settings fall back
to the defaults; the editor never refuses to start over its config.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"


@dataclass
class EditorConfig:
    message_timeout: float = EditorConstants.MESSAGE_TIMEOUT
    system_clipboard: bool = False


def default_config_path() -> Path:
    return Path(platformdirs.user_config_dir("cilo")) / CONFIG_FILENAME


def _validate_setting(key: str, value: Any) -> bool:
    """Check the type and range of a single setting."""
    if key == 'message_timeout':
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return value > 0
    if key == 'system_clipboard':
        return isinstance(value, bool)
    return False


def _read_settings(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config from {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Config file {path} has invalid format (not a dict), ignoring")
        return {}
    return data


def load_config(path: Optional[Path] = None) -> EditorConfig:
    """Load the editor configuration, falling back to defaults per setting."""
    path = path or default_config_path()
    settings = _read_settings(path)
    known = {f.name for f in fields(EditorConfig)}

    values: Dict[str, Any] = {}
    for key, value in settings.items():
        if key not in known:
            logger.warning(f"Unknown config setting {key!r} in {path}, ignoring")
            continue
        if not _validate_setting(key, value):
            logger.warning(f"Invalid value {value!r} for config setting {key!r}, using default")
            continue
        values[key] = value

    config = EditorConfig(**values)
    logger.debug(f"Loaded config from {path}: {config}")
    return config
