# ============================================
# file: src/html_shell/core/handlers/validate_handler.py
# ============================================
from __future__ import annotations

import argparse
import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from html_engine.controllers.engine_controller import engine
from html_shell.core.context.shell_context import ShellContext
from html_shell.core.services.options_service import build_validator_options

logger = logging.getLogger(__name__)

validate_help_text = """
  validate [<file>] [--no-warnings] [--prettify|--no-prettify] [--indent-size <N>] [--json]
      Validates HTML from a file (or stdin) and prints the validation report.
      --json prints the raw errors and warnings instead of the report.
      Exits with 1 when the document has errors; warnings never fail it.
""".strip()


def handle_validate(args: List[str], ctx: ShellContext, stdin: Optional[str] = None) -> int:
    parser = argparse.ArgumentParser(prog="validate", description="Validate HTML structure.")
    parser.add_argument("file", nargs="?", default=None, help="HTML file (defaults to stdin).")
    parser.add_argument("--no-warnings", action="store_true", help="Hide advisory warnings.")
    parser.add_argument("--prettify", dest="prettify", action="store_true", default=None,
                        help="Also print a beautified copy of the input.")
    parser.add_argument("--no-prettify", dest="prettify", action="store_false")
    parser.add_argument("--indent-size", type=int, default=None, help="Indent size for --prettify.")
    parser.add_argument("--json", action="store_true", help="Print diagnostics as JSON.")

    try:
        pargs = parser.parse_args(args)
    except SystemExit:
        return 1

    try:
        html, label = ctx.load_html(pargs.file, stdin)
    except (OSError, ValueError) as e:
        print(f"❌ Error: {e}")
        return 1

    if pargs.json:
        result = engine.validate(html)
        print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return 0 if result.success else 1

    try:
        options = build_validator_options({
            "include_warnings": False if pargs.no_warnings else None,
            "prettify_output": pargs.prettify,
            "indent_size": pargs.indent_size,
        })
    except ValidationError as e:
        print(f"❌ Invalid validator settings: {e}")
        return 1

    report = engine.check(html, options)
    if report.error:
        print(f"❌ Error: {report.error}")
        return 1

    logger.info("Validated %s: %d error(s), %d warning(s).", label, report.error_count, report.warning_count)
    print(report.output)
    if report.prettified:
        print("\n### Prettified HTML\n")
        print(report.prettified)
    return 0 if report.valid else 1
