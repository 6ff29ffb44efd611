# src/html_shell/core/command_registry.py
import logging
from typing import Callable, Dict

from html_shell.core.discovery import discover_handlers

logger = logging.getLogger(__name__)

# The central registries, populated dynamically.
CommandRegistry: Dict[str, Callable[..., int]] = {}
COMMAND_HELP_TEXTS: Dict[str, str] = {}


def register_command(name: str, handler: Callable[..., int]) -> None:
    """Adds a command and its handler function to the registry."""
    CommandRegistry[name] = handler
    logger.debug("Registered command '%s'", name)


def register_all_commands() -> None:
    """Discovers all handlers and help texts, then registers them. Safe to call twice."""
    if CommandRegistry:
        return

    discovered_handlers, discovered_help_texts = discover_handlers()
    for name, handler in discovered_handlers.items():
        register_command(name, handler)
    COMMAND_HELP_TEXTS.update(discovered_help_texts)

    logger.debug("Successfully registered %d handlers.", len(CommandRegistry))
