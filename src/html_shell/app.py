from __future__ import annotations

import logging
import sys
from typing import List, Optional

from html_shell.core.command_registry import CommandRegistry, register_all_commands
from html_shell.core.context.shell_context import ShellContext
from html_shell.core.managers.config_manager import config_manager
from html_shell.core.utils.configure_logging import configure_logger
from html_shell.core.utils.helptext import get_help_text

logger = logging.getLogger(__name__)


def _init_logging() -> None:
    """Initialize logging based on the 'debug' section of settings.json."""
    configure_logger(
        config_manager.get_nested("debug.level", "WARNING"),
        module_specific_levels=config_manager.get_nested("debug.modules", {}),
    )


def run_command(name: str, args: List[str], ctx: ShellContext, stdin: Optional[str] = None) -> int:
    """Dispatches one command to its registered handler and returns the exit code."""
    register_all_commands()
    handler = CommandRegistry.get(name)
    if handler is None:
        print(f"❌ Unknown command: '{name}'. Type 'help' for the list of commands.")
        return 1
    try:
        return handler(args, ctx, stdin)
    except KeyboardInterrupt:
        print("\n⛔ Interrupted.")
        return 130


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for running the HTML shell from the command line."""
    argv = list(sys.argv[1:] if argv is None else argv)
    _init_logging()
    register_all_commands()

    if not argv or argv[0] in ("-h", "--help"):
        print(get_help_text())
        return 0

    command, args = argv[0], argv[1:]
    logger.debug("Running command '%s' with args %s", command, args)
    return run_command(command, args, ShellContext())


if __name__ == "__main__":
    sys.exit(main())
