# ============================================
# file: src/html_shell/core/handlers/batch_handler.py
# ============================================
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from html_shell.core.context.shell_context import ShellContext
from html_shell.core.controllers.batch_controller import BatchController
from html_shell.core.managers.config_manager import config_manager
from html_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

batch_help_text = """
  batch <dir> [--pattern <glob>] [--recursive] [--workers <N>] [--export <file.csv|file.json>]
      Validates every matching file in a directory in parallel and prints a summary.
      --export writes one row per diagnostic (relative paths go to ~/Documents).
""".strip()


def handle_batch(args: List[str], ctx: ShellContext, _stdin: Optional[str] = None) -> int:
    """Handles the 'batch' command: parallel validation of a directory of HTML files."""
    parser = argparse.ArgumentParser(prog="batch", description="Validate many HTML files at once.")
    parser.add_argument("directory", help="Directory containing the HTML files.")
    parser.add_argument("--pattern", default=None, help="Glob pattern (default: batch.pattern).")
    parser.add_argument("--recursive", "-r", action="store_true", help="Descend into subdirectories.")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes (default: batch.workers).")
    parser.add_argument("--export", default=None, help="Export all diagnostics to .csv or .json.")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")

    try:
        pargs = parser.parse_args(args)
    except SystemExit:
        return 1

    directory = Path(pargs.directory).expanduser()
    if not directory.is_dir():
        print(f"❌ Error: '{directory}' is not a directory.")
        return 1

    pattern = pargs.pattern or config_manager.get_nested("batch.pattern", "*.html")
    workers = pargs.workers if pargs.workers is not None else config_manager.get_nested("batch.workers", 4)
    try:
        workers = int(workers)
    except (TypeError, ValueError):
        print(f"❌ Error: invalid worker count '{workers}'.")
        return 1

    controller = BatchController(max_input_bytes=ctx.max_input_bytes)
    files = controller.collect_files(directory, pattern, recursive=pargs.recursive)
    if not files:
        print(f"⚠️ No files matching '{pattern}' in {directory}.")
        return 0

    print(f"🚀 Validating {len(files)} file(s) with {max(1, workers)} worker(s)...")
    stats = controller.validate_files(files, workers=workers, show_progress=not pargs.no_progress)

    for r in stats["results"]:
        if r["error"]:
            print(f"❌ {r['source']}: {r['error']}")
        elif r["error_count"]:
            print(f"❌ {r['source']}: {r['error_count']} error(s), {r['warning_count']} warning(s)")
        else:
            print(f"✅ {r['source']}: valid ({r['warning_count']} warning(s))")

    print(
        f"\n📊 {stats['files_total']} files, {stats['files_passed']} passed, {stats['files_failed']} failed; "
        f"{stats['errors_total']} error(s), {stats['warnings_total']} warning(s) in {stats['timing']}"
    )

    if pargs.export:
        output_file = PathUtils.resolve_export_path(pargs.export)
        df = controller.to_dataframe(stats["results"])
        try:
            controller.export(df, output_file)
        except (OSError, ValueError) as e:
            logger.error("Export failed: %s", e, exc_info=True)
            print(f"❌ Export failed: {e}")
            return 1
        print(f"✅ Exported {len(df)} diagnostic row(s) to: {output_file}")

    return 0 if stats["files_failed"] == 0 else 1
