# ============================================
# file: src/html_engine/controllers/engine_controller.py
# ============================================
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from html_engine.model import (
    FormatOptions,
    FormatResult,
    FormatStats,
    Token,
    ValidationResult,
    ValidatorOptions,
    ValidatorReport,
)
from html_engine.services.format_service import FormatService
from html_engine.services.lexer_service import LexerService
from html_engine.services.report_service import ReportService
from html_engine.services.tag_stack_service import validate_tokens

logger = logging.getLogger(__name__)

OptionsLike = Union[FormatOptions, Dict[str, Any], None]


def _require_content(html: Any, action: str) -> str:
    """Rejects non-string and empty/whitespace-only input before lexing."""
    if not isinstance(html, str):
        raise ValueError(f"HTML content must be a string, got {type(html).__name__}.")
    if not html.strip():
        raise ValueError(f"HTML content required: please provide HTML to {action}.")
    return html


def _coerce_options(options: OptionsLike, model):
    if options is None:
        return model()
    if isinstance(options, model):
        return options
    return model.model_validate(options)


class EngineController:
    """
    Public entry points of the HTML engine.

    Every method except `tokenize` is total: malformed markup is reported
    through diagnostics and any failure comes back as
    `success=False` with an `error` message instead of an exception.
    """

    def tokenize(self, html: str) -> List[Token]:
        """Lexes `html` into tokens. Never raises for a string input."""
        return LexerService(html).tokenize()

    def validate(self, html: str) -> ValidationResult:
        try:
            _require_content(html, "validate")
            tokens = LexerService(html).tokenize()
            errors, warnings = validate_tokens(tokens)
            return ValidationResult(success=not errors, errors=errors, warnings=warnings)
        except ValueError as e:
            logger.info("Validation refused: %s", e)
            return ValidationResult(success=False, error=str(e))
        except Exception as e:
            logger.error("Validation failed unexpectedly: %s", e, exc_info=True)
            return ValidationResult(success=False, error=f"Failed to validate HTML: {e}")

    def format(self, html: str, options: OptionsLike = None, *, validate: bool = False) -> FormatResult:
        """
        Beautifies or minifies `html` according to `options`.

        Args:
            html (str): The raw HTML.
            options (FormatOptions | dict | None): Formatter settings; dicts are
                validated, so unknown keys are rejected.
            validate (bool): Also run the validator and attach its findings to the stats.

        Returns:
            FormatResult: The output plus size statistics, or an error message.
        """
        try:
            _require_content(html, "process")
            opts = _coerce_options(options, FormatOptions)
            tokens = LexerService(html).tokenize()
            output = FormatService(opts).format(tokens)

            errors, warnings = validate_tokens(tokens) if validate else ([], [])
            original_size = len(html)
            stats = FormatStats(
                original_size=original_size,
                processed_size=len(output),
                compression_ratio=len(output) / original_size if original_size else 1.0,
                line_count=output.count("\n") + 1,
                errors=errors,
                warnings=warnings,
            )
            return FormatResult(success=True, output=output, stats=stats)
        except ValidationError as e:
            logger.info("Invalid format options: %s", e)
            return FormatResult(success=False, error=f"Invalid format options: {e}")
        except ValueError as e:
            logger.info("Formatting refused: %s", e)
            return FormatResult(success=False, error=str(e))
        except Exception as e:
            logger.error("Formatting failed unexpectedly: %s", e, exc_info=True)
            return FormatResult(success=False, error=f"Failed to process HTML: {e}")

    def check(self, html: str, options: Union[ValidatorOptions, Dict[str, Any], None] = None) -> ValidatorReport:
        """
        Runs the HTML5 validator tool: validation, the text report and an
        optional prettified copy of the input.
        """
        try:
            opts = _coerce_options(options, ValidatorOptions)
        except ValidationError as e:
            logger.info("Invalid validator options: %s", e)
            return ValidatorReport(success=False, error=f"Invalid validator options: {e}")

        result = self.validate(html)
        if result.error:
            return ValidatorReport(success=False, error=result.error)

        visible_warnings = result.warnings if opts.include_warnings else []
        report = ReportService.render(result.errors, visible_warnings, include_warnings=opts.include_warnings)

        prettified: Optional[str] = None
        if opts.prettify_output:
            pretty = self.format(html, FormatOptions(
                mode="beautify",
                indent_size=opts.indent_size,
                indent_char="space",
                max_line_length=120,
                preserve_comments=True,
                preserve_empty_lines=False,
                sort_attributes=False,
                remove_trailing_spaces=True,
                self_close_tags=True,
            ))
            if pretty.success:
                prettified = pretty.output

        return ValidatorReport(
            success=result.success,
            output=report,
            valid=result.success,
            error_count=len(result.errors),
            warning_count=len(visible_warnings),
            prettified=prettified,
        )


# The module-level instance used by the shell and by library callers.
engine = EngineController()
