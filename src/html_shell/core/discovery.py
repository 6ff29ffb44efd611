# src/html_shell/core/discovery.py
import importlib
import logging
from typing import Any, Dict, Tuple

from html_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

HANDLERS_PACKAGE = "html_shell.core.handlers"


def discover_handlers() -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Scans the handlers directory (recursively) for `*_handler.py` modules and returns:
    1. A map of command names to their handler function (`handle_<name>`).
    2. A map of command names to their help text (`<name>_help_text`).
    """
    discovered_handlers: Dict[str, Any] = {}
    discovered_help_texts: Dict[str, str] = {}

    handlers_dir = PathUtils.get_handlers_dir()
    if not handlers_dir.is_dir():
        logger.warning("Handlers directory not found: %s", handlers_dir)
        return discovered_handlers, discovered_help_texts

    for file_path in sorted(handlers_dir.glob("**/*_handler.py")):
        relative_parts = list(file_path.relative_to(handlers_dir).with_suffix("").parts)
        module_name = ".".join([HANDLERS_PACKAGE] + relative_parts)
        try:
            module = importlib.import_module(module_name)
        except Exception as e:
            logger.error("Failed to load handler module %s: %s", file_path.name, e, exc_info=True)
            continue

        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if attr_name.startswith("handle_") and callable(attr):
                command_name = attr_name[len("handle_"):]
                discovered_handlers[command_name] = attr
                logger.debug("Discovered command '%s'", command_name)
            elif attr_name.endswith("_help_text") and isinstance(attr, str):
                discovered_help_texts[attr_name[:-len("_help_text")]] = attr

    return discovered_handlers, discovered_help_texts
