# tests/engine/test_engine_controller.py
import pytest

from html_engine.controllers.engine_controller import EngineController, engine
from html_engine.model import FormatOptions, TokenKind, ValidatorOptions
from html_engine.services.report_service import FAILED_HEADER, PASSED_HEADER


@pytest.fixture
def controller():
    return EngineController()


def test_module_singleton():
    assert isinstance(engine, EngineController)


def test_tokenize(controller):
    tokens = controller.tokenize("<p>x</p>")
    assert [t.kind for t in tokens] == [TokenKind.TAG_OPEN, TokenKind.TEXT, TokenKind.TAG_CLOSE]
    with pytest.raises(TypeError):
        controller.tokenize(42)


@pytest.mark.parametrize("html", ["", "   \n\t"])
def test_empty_input_is_rejected(controller, html):
    """Lege invoer: success=False, 'content required', geen diagnostics."""
    result = controller.validate(html)
    assert result.success is False
    assert "HTML content required" in result.error
    assert result.errors == [] and result.warnings == []

    formatted = controller.format(html)
    assert formatted.success is False
    assert "HTML content required" in formatted.error
    assert formatted.output is None and formatted.stats is None


def test_non_string_input_is_an_error(controller):
    result = controller.validate(None)
    assert result.success is False
    assert "must be a string" in result.error


def test_validate_invalid_document(controller):
    result = controller.validate("<div><p>Hi</div>")
    assert result.success is False
    assert [e.code for e in result.errors] == ["UNCLOSED_TAG"]
    assert result.error is None


def test_format_accepts_dict_options(controller):
    result = controller.format("<br>", {"mode": "beautify", "self_close_tags": True})
    assert result.success
    assert result.output == "<br />"


def test_format_rejects_unknown_option_keys(controller):
    result = controller.format("<p>x</p>", {"indent_size": 2, "bogus": True})
    assert result.success is False
    assert result.error.startswith("Invalid format options")


def test_format_reports_stats(controller):
    result = controller.format("<p>  a  </p>", FormatOptions(mode="minify"))
    assert result.output == "<p>a</p>"
    stats = result.stats
    assert stats.original_size == 12
    assert stats.processed_size == 8
    assert stats.compression_ratio == pytest.approx(8 / 12)
    assert stats.line_count == 1
    assert stats.errors == [] and stats.warnings == []


def test_format_with_validation_never_blocks_output(controller):
    """Structurele fouten blokkeren format() niet."""
    result = controller.format("<div><p>x</div>", validate=True)
    assert result.success
    assert [e.code for e in result.stats.errors] == ["UNCLOSED_TAG"]


def test_format_catches_unexpected_failures(controller, monkeypatch):
    def explode(self, tokens):
        raise RuntimeError("boom")

    monkeypatch.setattr("html_engine.services.format_service.FormatService.format", explode)
    result = controller.format("<p>x</p>")
    assert result.success is False
    assert "boom" in result.error


def test_check_failed_report(controller):
    report = controller.check("<div><p>Hi</div>", {"prettify_output": False})
    assert report.success is False
    assert report.valid is False
    assert report.error_count == 1
    assert report.output == (
        f"{FAILED_HEADER}\n\n### Errors\n"
        "1. Line 1, Column 6: Unclosed tag <p> (implicitly closed by </div>) (UNCLOSED_TAG)"
    )
    assert report.prettified is None


def test_check_passed_with_warnings_and_prettified_output(controller):
    report = controller.check('<div id="a" id="b">x</div>')
    assert report.valid is True
    assert report.warning_count == 1
    assert report.output.startswith(PASSED_HEADER + "\n\n### Warnings\n1. Line 1, Column 1: ")
    assert report.output.endswith("(DUPLICATE_ATTRIBUTE)")
    assert report.prettified == '<div id="b">x</div>'


def test_check_without_warnings(controller):
    report = controller.check("<center>x</center>", ValidatorOptions(include_warnings=False, prettify_output=False))
    assert report.output == PASSED_HEADER
    assert report.warning_count == 0


def test_check_rejects_bad_options_and_empty_input(controller):
    assert controller.check("<p>x</p>", {"indent_size": -1}).success is False
    report = controller.check("")
    assert report.success is False
    assert "HTML content required" in report.error
