# file: src/html_shell/core/utils/parallel_workers.py
import logging
from pathlib import Path
from typing import Any, Dict

from html_engine.controllers.engine_controller import engine
from html_engine.services.report_service import ReportService

logger = logging.getLogger(__name__)


def validate_file_worker(path: str, max_input_bytes: int) -> Dict[str, Any]:
    """
    Worker function validating one HTML file.

    Returns a plain dict (cheap to pickle across processes):
    {"source", "success", "error", "error_count", "warning_count", "diagnostics"}.
    """
    summary: Dict[str, Any] = {
        "source": path,
        "success": False,
        "error": None,
        "error_count": 0,
        "warning_count": 0,
        "diagnostics": [],
    }
    try:
        html = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("WORKER ERROR reading %s: %s", path, e)
        summary["error"] = f"Could not read file: {e}"
        return summary

    size = len(html.encode("utf-8"))
    if max_input_bytes and size > max_input_bytes:
        summary["error"] = f"File is {size} bytes, above the limit of {max_input_bytes} bytes"
        return summary

    result = engine.validate(html)
    summary["success"] = result.success
    summary["error"] = result.error
    summary["error_count"] = len(result.errors)
    summary["warning_count"] = len(result.warnings)
    summary["diagnostics"] = ReportService.to_records(result.errors + result.warnings, source=path)
    return summary
