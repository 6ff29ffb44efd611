# src/html_engine/services/report_service.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from html_engine.model import Diagnostic

PASSED_HEADER = "✅ HTML passed validation"
FAILED_HEADER = "❌ HTML failed validation"


class ReportService:
    """
    Aggregates diagnostics into a stable, sorted report.
    Stateless; all methods are static.
    """

    @staticmethod
    def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
        """Stable sort by (line, column); equal positions keep their discovery order."""
        return sorted(diagnostics, key=lambda d: d.sort_key)

    @staticmethod
    def split(diagnostics: Iterable[Diagnostic]) -> Tuple[List[Diagnostic], List[Diagnostic]]:
        """Returns (errors, warnings), both sorted."""
        ordered = ReportService.sort_diagnostics(diagnostics)
        errors = [d for d in ordered if d.severity == "error"]
        warnings = [d for d in ordered if d.severity == "warning"]
        return errors, warnings

    @staticmethod
    def format_line(index: int, diagnostic: Diagnostic) -> str:
        return (
            f"{index}. Line {diagnostic.line}, Column {diagnostic.column}: "
            f"{diagnostic.message} ({diagnostic.code})"
        )

    @staticmethod
    def render(
            errors: List[Diagnostic],
            warnings: List[Diagnostic],
            include_warnings: bool = True,
    ) -> str:
        """
        Renders the human-readable validation report.

        The header reflects validity (errors only); the warnings block is
        appended whenever warnings are shown, for valid and invalid input.
        """
        lines: List[str] = []
        if not errors:
            lines.append(PASSED_HEADER)
        else:
            lines.append(FAILED_HEADER)
            lines.append("")
            lines.append("### Errors")
            for index, diagnostic in enumerate(ReportService.sort_diagnostics(errors), start=1):
                lines.append(ReportService.format_line(index, diagnostic))

        if include_warnings and warnings:
            lines.append("")
            lines.append("### Warnings")
            for index, diagnostic in enumerate(ReportService.sort_diagnostics(warnings), start=1):
                lines.append(ReportService.format_line(index, diagnostic))

        return "\n".join(lines)

    @staticmethod
    def to_records(diagnostics: Iterable[Diagnostic], source: Optional[str] = None) -> List[Dict[str, Any]]:
        """Flattens diagnostics into dicts (one row each) for tabular export."""
        records = []
        for d in ReportService.sort_diagnostics(diagnostics):
            records.append({
                "source": source,
                "severity": d.severity,
                "code": d.code,
                "line": d.line,
                "column": d.column,
                "message": d.message,
            })
        return records
