# src/html_shell/core/context/shell_context.py
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

from html_shell.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

DEFAULT_MAX_INPUT_BYTES = 5_000_000


class ShellContext:
    """
    Holds the per-invocation state shared by the command handlers:
    the input-size limit and the source of the HTML being processed.
    """

    def __init__(self, max_input_bytes: Optional[int] = None):
        configured = config_manager.get_nested("shell.max_input_bytes", DEFAULT_MAX_INPUT_BYTES)
        self.max_input_bytes = int(max_input_bytes if max_input_bytes is not None else configured)

    def check_size(self, html: str, label: str) -> None:
        """Refuses input above the configured limit before it reaches the engine."""
        size = len(html.encode("utf-8"))
        if self.max_input_bytes and size > self.max_input_bytes:
            raise ValueError(
                f"Input '{label}' is {size} bytes, above the limit of {self.max_input_bytes} bytes "
                f"(see shell.max_input_bytes)."
            )

    def load_html(self, path: Optional[str], stdin: Optional[str] = None) -> Tuple[str, str]:
        """
        Returns (html, label) from a file path, piped stdin text, or the
        process stdin when neither is given.

        Raises:
            OSError: The file cannot be read.
            ValueError: No input is available or it is too large.
        """
        if path:
            file_path = Path(path).expanduser()
            html = file_path.read_text(encoding="utf-8")
            label = str(file_path)
        elif stdin is not None:
            html, label = stdin, "<stdin>"
        elif not sys.stdin.isatty():
            html, label = sys.stdin.read(), "<stdin>"
        else:
            raise ValueError("No input given: pass a file path or pipe HTML on stdin.")

        self.check_size(html, label)
        logger.debug("Loaded %d characters from %s.", len(html), label)
        return html, label
