# tests/engine/test_attributes.py
from html_engine.model import DUPLICATE_ATTRIBUTE, MALFORMED_ATTRIBUTE, Position
from html_engine.services.attribute_parse_service import parse_attributes, scan_attributes

START = Position(line=3, column=5)


def test_parse_mixed_attribute_styles():
    """Dubbele, enkele, ongequote en booleaanse attributen."""
    attrs, diags = parse_attributes(""" id="a" disabled data-x=1 title='t'""", START)
    assert diags == []
    assert [(a.name, a.value, a.quote) for a in attrs] == [
        ("id", "a", "double"),
        ("disabled", None, "none"),
        ("data-x", "1", "none"),
        ("title", "t", "single"),
    ]


def test_whitespace_around_equals_sign():
    attrs, diags = parse_attributes(' class = "big"\n\tid=x', START)
    assert diags == []
    assert [(a.name, a.value) for a in attrs] == [("class", "big"), ("id", "x")]


def test_duplicate_attribute_last_value_wins():
    """Bij dubbele attributen wint de laatste waarde, op de plaats van de eerste."""
    attrs, diags = parse_attributes(' id="a" class="c" ID="b"', START, "div")
    assert [(a.name, a.value) for a in attrs] == [("ID", "b"), ("class", "c")]
    assert len(diags) == 1
    assert diags[0].code == DUPLICATE_ATTRIBUTE
    assert diags[0].severity == "warning"
    assert '"ID"' in diags[0].message


def test_unterminated_quote_is_malformed():
    attrs, diags = parse_attributes(' title="abc', START)
    assert attrs[0].value == "abc"
    assert [d.code for d in diags] == [MALFORMED_ATTRIBUTE]
    assert diags[0].severity == "error"


def test_unterminated_quote_stops_at_gt():
    scan = scan_attributes('<a title="abc>rest', 2, START, "a")
    assert scan.attributes[0].value == "abc"
    assert scan.terminated
    assert scan.end == len('<a title="abc>')


def test_missing_value_after_equals():
    _, diags = parse_attributes(" alt=", START, "img")
    assert [d.code for d in diags] == [MALFORMED_ATTRIBUTE]
    assert "missing a value" in diags[0].message


def test_illegal_character_in_name():
    attrs, diags = parse_attributes(' a"b=1', START)
    assert attrs[0].name == 'a"b'
    assert [d.code for d in diags] == [MALFORMED_ATTRIBUTE]


def test_value_without_name():
    attrs, diags = parse_attributes(' ="x" id=y', START)
    assert [a.name for a in attrs] == ["id"]
    assert "without a name" in diags[0].message


def test_diagnostics_use_tag_start_position():
    """Alle diagnostics krijgen de positie van het begin van de tag."""
    _, diags = parse_attributes(' x="1" x="2" y=', START)
    assert diags
    assert all(d.position == START for d in diags)


def test_slash_before_gt_marks_self_closing():
    scan = scan_attributes("<x a=1 />", 2, START)
    assert scan.slash_closed
    assert scan.terminated

    scan = scan_attributes("<x a=1 / b>", 2, START)
    assert not scan.slash_closed
    assert [a.name for a in scan.attributes] == ["a", "b"]
