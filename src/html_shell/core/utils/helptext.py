# src/html_shell/core/utils/helptext.py
from html_shell.core.command_registry import COMMAND_HELP_TEXTS

HEADER_HELP_TEXT = """
🧰 HTML Shell - Help

Validate, beautify and minify HTML from files or stdin.

---
USAGE
---
  html-shell <command> [arguments]
  cat page.html | html-shell minify

  Exit codes: 0 = success, 1 = failure or invalid HTML.

---
COMMANDS
---
  help                Show this help text.
""".strip()


def get_help_text() -> str:
    """
    Assembles the full help text from the header and all discovered
    help text fragments of the command handlers.
    """
    full_help_parts = [HEADER_HELP_TEXT]
    for command_name in sorted(COMMAND_HELP_TEXTS.keys()):
        full_help_parts.append(COMMAND_HELP_TEXTS[command_name])
    return "\n\n".join(full_help_parts)
