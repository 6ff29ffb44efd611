# ============================================
# file: src/html_shell/core/handlers/format_handler.py
# ============================================
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from pydantic import ValidationError

from html_engine.controllers.engine_controller import engine
from html_engine.services.report_service import ReportService
from html_shell.core.context.shell_context import ShellContext
from html_shell.core.services.options_service import build_format_options
from html_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

_PAST_TENSE = {"beautify": "Beautified", "minify": "Minified"}

beautify_help_text = """
  beautify [<file>] [-o <path>] [--indent-size <N>] [--tabs] [--sort-attributes]
           [--strip-comments] [--preserve-empty-lines] [--no-self-close]
           [--keep-trailing-spaces] [--max-line-length <N>] [--stats] [--validate]
      Re-indents HTML into a readable tree. Defaults come from 'formatter.*' in settings.json.
""".strip()

minify_help_text = """
  minify [<file>] [-o <path>] [--keep-comments|--strip-comments] [--sort-attributes]
         [--no-self-close] [--stats] [--validate]
      Removes redundant whitespace (and comments, unless kept) from HTML.
""".strip()


def _build_parser(mode: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=mode, description=f"{mode.capitalize()} HTML.")
    parser.add_argument("file", nargs="?", default=None, help="HTML file (defaults to stdin).")
    parser.add_argument("--output", "-o", help="Write the result to this file instead of stdout.")
    parser.add_argument("--sort-attributes", dest="sort_attributes", action="store_true", default=None)
    parser.add_argument("--no-self-close", dest="self_close_tags", action="store_false", default=None,
                        help="Render void elements as <br> instead of <br />.")
    parser.add_argument("--stats", action="store_true", help="Print size statistics.")
    parser.add_argument("--validate", action="store_true", help="Also report validation findings.")

    comments = parser.add_mutually_exclusive_group()
    comments.add_argument("--keep-comments", dest="preserve_comments", action="store_true", default=None)
    comments.add_argument("--strip-comments", dest="preserve_comments", action="store_false")

    if mode == "beautify":
        parser.add_argument("--indent-size", type=int, default=None)
        parser.add_argument("--tabs", dest="indent_char", action="store_const", const="tab", default=None)
        parser.add_argument("--preserve-empty-lines", dest="preserve_empty_lines", action="store_true",
                            default=None)
        parser.add_argument("--keep-trailing-spaces", dest="remove_trailing_spaces", action="store_false",
                            default=None)
        parser.add_argument("--max-line-length", type=int, default=None)
    return parser


def _run_format(mode: str, args: List[str], ctx: ShellContext, stdin: Optional[str]) -> int:
    parser = _build_parser(mode)
    try:
        pargs = parser.parse_args(args)
    except SystemExit:
        return 1

    try:
        html, label = ctx.load_html(pargs.file, stdin)
    except (OSError, ValueError) as e:
        print(f"❌ Error: {e}")
        return 1

    overrides = {
        key: getattr(pargs, key, None)
        for key in ("indent_size", "indent_char", "preserve_comments", "preserve_empty_lines",
                    "sort_attributes", "remove_trailing_spaces", "self_close_tags", "max_line_length")
    }
    # Minify drops comments unless asked to keep them.
    if mode == "minify" and overrides["preserve_comments"] is None:
        overrides["preserve_comments"] = False

    try:
        options = build_format_options(mode, overrides)
    except ValidationError as e:
        print(f"❌ Invalid formatter settings: {e}")
        return 1

    result = engine.format(html, options, validate=pargs.validate)
    if not result.success:
        print(f"❌ Error: {result.error}")
        return 1

    if pargs.output:
        out_path = PathUtils.resolve_export_path(pargs.output)
        try:
            out_path.write_text(result.output + "\n", encoding="utf-8")
        except OSError as e:
            logger.error("Could not write %s: %s", out_path, e, exc_info=True)
            print(f"❌ Error: could not write '{out_path}': {e}")
            return 1
        print(f"✅ {_PAST_TENSE[mode]} {label} -> {out_path}")
    else:
        print(result.output)

    stats = result.stats
    if pargs.stats and stats:
        print(
            f"📊 {stats.original_size} -> {stats.processed_size} characters "
            f"(ratio {stats.compression_ratio:.2f}, {stats.line_count} lines)"
        )
    if pargs.validate and stats:
        for d in ReportService.sort_diagnostics(stats.errors + stats.warnings):
            marker = "❌" if d.severity == "error" else "⚠️"
            print(f"{marker} Line {d.line}, Column {d.column}: {d.message} ({d.code})")
    return 0


def handle_beautify(args: List[str], ctx: ShellContext, stdin: Optional[str] = None) -> int:
    return _run_format("beautify", args, ctx, stdin)


def handle_minify(args: List[str], ctx: ShellContext, stdin: Optional[str] = None) -> int:
    return _run_format("minify", args, ctx, stdin)
