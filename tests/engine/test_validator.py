# tests/engine/test_validator.py
import pytest

from html_engine.model import (
    DEPRECATED_ELEMENT,
    DUPLICATE_ATTRIBUTE,
    MALFORMED_TAG,
    MISMATCHED_CLOSE,
    SELF_CLOSING_NON_VOID,
    UNCLOSED_COMMENT,
    UNCLOSED_TAG,
)
from html_engine.services.lexer_service import tokenize
from html_engine.services.tag_stack_service import TagStackService, validate_tokens


def _validate(html):
    return validate_tokens(tokenize(html))


def _codes(diags):
    return [d.code for d in diags]


def test_unclosed_child_is_reported_at_its_open_tag():
    """<div><p>Hi</div>: één UNCLOSED_TAG voor p op 1:6."""
    errors, warnings = _validate("<div><p>Hi</div>")
    assert _codes(errors) == [UNCLOSED_TAG]
    assert (errors[0].line, errors[0].column) == (1, 6)
    assert "<p>" in errors[0].message
    assert warnings == []


def test_script_body_is_not_markup():
    errors, _ = _validate("<script>if (a < b) {}</script>")
    assert errors == []


def test_stray_close_tag_is_mismatched():
    errors, _ = _validate("<div></span></div>")
    assert _codes(errors) == [MISMATCHED_CLOSE]
    assert (errors[0].line, errors[0].column) == (1, 6)


def test_close_tag_for_void_element():
    errors, _ = _validate("<br></br>")
    assert _codes(errors) == [MISMATCHED_CLOSE]
    assert "void element" in errors[0].message


def test_leftover_elements_are_unclosed_in_source_order():
    errors, _ = _validate("<div>\n  <span>")
    assert _codes(errors) == [UNCLOSED_TAG, UNCLOSED_TAG]
    assert [(e.line, e.column) for e in errors] == [(1, 1), (2, 3)]


def test_topmost_match_wins():
    """Bij geneste gelijke tags sluit de bovenste."""
    errors, _ = _validate("<div><div><p></div></div>")
    assert _codes(errors) == [UNCLOSED_TAG]
    assert errors[0].column == 11


def test_unclosed_comment():
    errors, _ = _validate("<p>x</p><!-- open")
    assert _codes(errors) == [UNCLOSED_COMMENT]


def test_unterminated_tags_are_malformed():
    errors, _ = _validate("<p>x</p")
    assert MALFORMED_TAG in _codes(errors)

    errors, _ = _validate("<div")
    assert _codes(errors) == [MALFORMED_TAG, UNCLOSED_TAG]


def test_self_closing_non_void_is_a_warning():
    errors, warnings = _validate("<div/><p>x</p>")
    assert errors == []
    assert _codes(warnings) == [SELF_CLOSING_NON_VOID]


def test_deprecated_element_is_a_warning():
    errors, warnings = _validate("<center>x</center>")
    assert errors == []
    assert _codes(warnings) == [DEPRECATED_ELEMENT]


def test_duplicate_attribute_is_a_warning():
    errors, warnings = _validate('<div  id="a"  id="b">x</div>')
    assert errors == []
    assert _codes(warnings) == [DUPLICATE_ATTRIBUTE]
    assert '"id"' in warnings[0].message


def test_attribute_errors_block_validity():
    errors, _ = _validate('<a href="x>link</a>')
    assert "MALFORMED_ATTRIBUTE" in _codes(errors)


def test_names_are_case_insensitive():
    errors, _ = _validate("<DIV><P>x</p></Div>")
    assert errors == []


@pytest.mark.parametrize("html", [
    "<html><head><title>T</title></head><body><p>a<br>b</p></body></html>",
    "<ul><li>1</li><li>2<img src=x></li></ul>",
    "<div><script>document.write('<p>')</script></div>",
])
def test_balanced_documents_leave_an_empty_stack(html):
    """Geldige invoer laat geen open elementen achter."""
    service = TagStackService()
    errors, warnings = service.validate(tokenize(html))
    assert errors == []
    assert service.stack == []


def test_warnings_never_affect_validity():
    errors, warnings = _validate('<div id=a id=b><center>x</center><section/></div>')
    assert errors == []
    assert len(warnings) == 3


def test_diagnostics_are_sorted_by_position():
    errors, _ = _validate("<b>\n<i>\n</u>")
    assert [(e.line, e.column) for e in errors] == [(1, 1), (2, 1), (3, 1)]
