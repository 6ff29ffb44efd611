# src/html_shell/core/managers/config_manager.py
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from html_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

# Names the user settings file layered over the packaged defaults.
USER_SETTINGS_ENV = "HTML_SHELL_SETTINGS"

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def _cast_like(original: Any, value: Any) -> Any:
    """Casts `value` to the type of `original`. Raises ValueError/TypeError when impossible."""
    if isinstance(original, bool):
        if isinstance(value, bool):
            return value
        lowered = str(value).strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"'{value}' is not a boolean")
    return type(original)(value)


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Returns `base` updated with `overlay`; nested sections merge key by key."""
    merged = copy.deepcopy(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_json(path: Path) -> Optional[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load %s: %s", path, e, exc_info=True)
        return None
    if not isinstance(data, dict):
        logger.error("Ignoring %s: the top level must be a JSON object.", path)
        return None
    return data


def user_settings_file() -> Path:
    configured = os.environ.get(USER_SETTINGS_ENV)
    if configured:
        return Path(configured).expanduser()
    return PathUtils.get_default_user_settings_file()


class ConfigManager:
    """
    A singleton holding the shell configuration.

    Packaged defaults come from settings.json; the user settings file
    (named by HTML_SHELL_SETTINGS, or ~/.html_shell/settings.json) is merged
    over them. set_nested changes the loaded values; persist writes one key
    to the user settings file so later runs pick it up.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._config: Dict[str, Any] = {}
        self.sources: List[Path] = []
        self.reset()
        logger.debug("ConfigManager initialized.")

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def section(self, name: str) -> Dict[str, Any]:
        """A copy of one top-level section ({} when absent or not a section)."""
        value = self._config.get(name)
        return dict(value) if isinstance(value, dict) else {}

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Looks up a dotted path such as 'formatter.indent_size'."""
        value: Any = self._config
        for key in key_path.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(key)
        return default if value is None else value

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a dotted path in memory. An existing value keeps its type
        ('true' becomes True for a boolean setting); a section cannot be
        replaced by a single value.
        """
        *parents, leaf = key_path.split('.')
        node = self._config
        for key in parents:
            node = node.setdefault(key, {})
            if not isinstance(node, dict):
                logger.error("Cannot set '%s': '%s' is not a section.", key_path, key)
                return False

        current = node.get(leaf)
        if isinstance(current, dict):
            logger.error("Cannot overwrite section '%s' with a single value.", key_path)
            return False
        if current is not None:
            try:
                value = _cast_like(current, value)
            except (ValueError, TypeError):
                logger.warning("Could not cast '%s' to %s; storing it as given.",
                               key_path, type(current).__name__)

        node[leaf] = value
        logger.info("Configuration updated: %s = %s", key_path, value)
        return True

    def persist(self, key_path: str) -> Path:
        """
        Writes the current value of `key_path` into the user settings file,
        keeping the other keys already stored there.

        Raises:
            ValueError: The existing user settings file is not a JSON object.
            OSError: The file cannot be written.
        """
        path = user_settings_file()
        overlay: Dict[str, Any] = {}
        if path.exists():
            loaded = _read_json(path)
            if loaded is None:
                raise ValueError(f"{path} is not a valid settings file; fix or remove it first.")
            overlay = loaded

        *parents, leaf = key_path.split('.')
        node = overlay
        for key in parents:
            if not isinstance(node.get(key), dict):
                node[key] = {}
            node = node[key]
        node[leaf] = self.get_nested(key_path)

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(overlay, f, indent=2)
        if path not in self.sources:
            self.sources.append(path)
        logger.info("Saved %s to %s", key_path, path)
        return path

    def clear_user_settings(self) -> Optional[Path]:
        """Deletes the user settings file and reloads. Returns the removed path, if any."""
        path = user_settings_file()
        removed = None
        if path.exists():
            path.unlink()
            removed = path
            logger.info("Removed user settings file %s", path)
        self.reset()
        return removed

    def reset(self):
        """Reloads the packaged defaults and the user settings file."""
        self._config = {}
        self.sources = []

        defaults_path = PathUtils.get_settings_file()
        if defaults_path.exists():
            defaults = _read_json(defaults_path)
            if defaults is not None:
                self._config = defaults
                self.sources.append(defaults_path)
        else:
            logger.warning("settings.json not found at %s. Using empty config.", defaults_path)

        user_path = user_settings_file()
        if user_path.exists():
            overlay = _read_json(user_path)
            if overlay is not None:
                self._config = _deep_merge(self._config, overlay)
                self.sources.append(user_path)

        logger.debug("Configuration loaded from: %s", ", ".join(map(str, self.sources)) or "nothing")


# The global singleton instance used by the whole shell.
config_manager = ConfigManager()
