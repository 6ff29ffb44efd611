from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from tqdm.auto import tqdm

from html_shell.core.utils.parallel_workers import validate_file_worker
from html_shell.core.utils.run_timers import RunTimers

logger = logging.getLogger(__name__)

DIAGNOSTIC_COLUMNS = ["source", "severity", "code", "line", "column", "message"]


class BatchController:
    """
    Validates many HTML files at once.
    Utilizes multiprocessing since lexing and validation are CPU-bound and
    share no state between documents.
    """

    def __init__(self, *, default_workers: Optional[int] = None, max_input_bytes: int = 0) -> None:
        self.default_workers = default_workers or (os.cpu_count() or 4)
        self.max_input_bytes = max_input_bytes

    @staticmethod
    def collect_files(directory: Path, pattern: str, recursive: bool = False) -> List[Path]:
        """Returns the matching files under `directory`, sorted for a stable order."""
        matches = directory.rglob(pattern) if recursive else directory.glob(pattern)
        return sorted(p for p in matches if p.is_file())

    def validate_files(
            self,
            files: List[Path],
            *,
            workers: Optional[int] = None,
            show_progress: bool = True,
    ) -> Dict[str, Any]:
        """
        Validates `files` and returns aggregate statistics plus per-file summaries.
        With a single worker everything runs in-process.
        """
        timer = RunTimers()
        timer.start()
        workers = max(1, workers or self.default_workers)

        with timer.phase("validate"):
            if workers == 1 or len(files) <= 1:
                results = self._run_sequential(files, show_progress)
            else:
                results = self._run_parallel(files, workers, show_progress)
        results.sort(key=lambda r: r["source"])
        timer.stop()

        stats = {
            "files_total": len(results),
            "files_passed": sum(1 for r in results if r["success"]),
            "files_failed": sum(1 for r in results if not r["success"]),
            "errors_total": sum(r["error_count"] for r in results),
            "warnings_total": sum(r["warning_count"] for r in results),
            "duration_s": round(timer.duration, 3),
            "timing": timer.summary(),
            "results": results,
        }
        logger.info("Batch validation done: %s", {k: v for k, v in stats.items() if k != "results"})
        return stats

    def _run_sequential(self, files: List[Path], show_progress: bool) -> List[Dict[str, Any]]:
        iterator = tqdm(files, desc="Validating", unit="file", leave=False, disable=not show_progress)
        return [validate_file_worker(str(path), self.max_input_bytes) for path in iterator]

    def _run_parallel(self, files: List[Path], workers: int, show_progress: bool) -> List[Dict[str, Any]]:
        results: List[Dict[str, Any]] = []
        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = {pool.submit(validate_file_worker, str(p), self.max_input_bytes): p for p in files}
            with tqdm(total=len(futures), desc="Validating", unit="file", leave=False,
                      disable=not show_progress) as bar:
                for future in as_completed(futures):
                    path = futures[future]
                    try:
                        results.append(future.result())
                    except Exception as e:
                        logger.error("Worker crashed on %s: %s", path, e, exc_info=True)
                        results.append({"source": str(path), "success": False,
                                        "error": f"Worker failed: {e}", "error_count": 0,
                                        "warning_count": 0, "diagnostics": []})
                    bar.update(1)
        return results

    @staticmethod
    def to_dataframe(results: List[Dict[str, Any]]) -> pd.DataFrame:
        """One row per diagnostic; files that could not be processed get a single 'error' row."""
        rows: List[Dict[str, Any]] = []
        for r in results:
            rows.extend(r["diagnostics"])
            if r["error"]:
                rows.append({"source": r["source"], "severity": "error", "code": "INPUT_ERROR",
                             "line": None, "column": None, "message": r["error"]})
        return pd.DataFrame(rows, columns=DIAGNOSTIC_COLUMNS)

    @staticmethod
    def export(df: pd.DataFrame, output_file: Path) -> Path:
        """Writes `df` as CSV or JSON, chosen by the file extension."""
        suffix = output_file.suffix.lower()
        if suffix == ".json":
            df.to_json(output_file, orient="records", indent=2, force_ascii=False)
        elif suffix == ".csv":
            df.to_csv(output_file, index=False)
        else:
            raise ValueError(f"Unsupported export format '{suffix}'. Use .csv or .json.")
        logger.info("Exported %d diagnostic rows to %s", len(df), output_file)
        return output_file
