# src/html_shell/core/handlers/config_handler.py
import json
import logging
from typing import Callable, Dict, List, Optional

from html_shell.core.context.shell_context import ShellContext
from html_shell.core.managers.config_manager import USER_SETTINGS_ENV, config_manager

logger = logging.getLogger(__name__)

config_help_text = f"""
  config list                Show the current configuration as JSON.
  config get <key>           Show one value (e.g., formatter.indent_size).
  config set <key> <value>   Set and save a value (e.g., formatter.sort_attributes true).
  config sources             Show which settings files were loaded.
  config reset               Remove the saved values (${USER_SETTINGS_ENV} or ~/.html_shell/settings.json).
""".strip("\n")

USAGE = "Usage:\n" + config_help_text


def _list(args: List[str]) -> int:
    print(json.dumps(config_manager.get_all(), indent=2))
    return 0


def _get(args: List[str]) -> int:
    if len(args) != 1:
        print("Usage: config get <key>")
        return 1
    value = config_manager.get_nested(args[0])
    if value is None:
        print(f"❌ Error: Unknown config key '{args[0]}'.")
        return 1
    print(json.dumps(value, indent=2) if isinstance(value, dict) else value)
    return 0


def _set(args: List[str]) -> int:
    if len(args) < 2:
        print("Usage: config set <key> <value>")
        return 1
    key_path, value = args[0], " ".join(args[1:])
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]

    if not config_manager.set_nested(key_path, value):
        print(f"❌ Error: Failed to set config value for key '{key_path}'.")
        return 1
    try:
        saved_to = config_manager.persist(key_path)
    except (OSError, ValueError) as e:
        logger.error("Could not save '%s': %s", key_path, e, exc_info=True)
        print(f"❌ Error: Could not save '{key_path}': {e}")
        return 1
    new_value = config_manager.get_nested(key_path)
    print(f"✅ Config updated: {key_path} = {new_value} (type: {type(new_value).__name__}), saved to {saved_to}")
    return 0


def _sources(args: List[str]) -> int:
    if not config_manager.sources:
        print("⚠️ No settings files loaded; running on built-in defaults.")
        return 0
    for path in config_manager.sources:
        print(path)
    return 0


def _reset(args: List[str]) -> int:
    try:
        removed = config_manager.clear_user_settings()
    except OSError as e:
        print(f"❌ Error: Could not remove the user settings file: {e}")
        return 1
    if removed is not None:
        print(f"✅ Removed saved settings: {removed}")
    print("✅ Configuration has been reset to the packaged defaults.")
    return 0


_SUBCOMMANDS: Dict[str, Callable[[List[str]], int]] = {
    "list": _list,
    "get": _get,
    "set": _set,
    "sources": _sources,
    "reset": _reset,
}


def handle_config(args: List[str], ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """Handles the 'config' command for viewing and modifying the configuration."""
    if not args:
        print(USAGE)
        return 1

    action = _SUBCOMMANDS.get(args[0])
    if action is None:
        print(f"Unknown command: 'config {args[0]}'.")
        return 1
    return action(args[1:])
