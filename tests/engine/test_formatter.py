# tests/engine/test_formatter.py
import pytest
from bs4 import BeautifulSoup

from html_engine.model import FormatOptions
from html_engine.services.format_service import FormatService, compile_options
from html_engine.services.lexer_service import tokenize


def beautify(html, **options):
    return FormatService(FormatOptions(mode="beautify", **options)).format(tokenize(html))


def minify(html, **options):
    return FormatService(FormatOptions(mode="minify", **options)).format(tokenize(html))


VALID_DOCUMENTS = [
    "<!DOCTYPE html><html><head><title>T</title></head><body><p>x</p></body></html>",
    "<div>\n  <p>Hello   <b>big</b>   world</p>\n\n  <ul><li>One</li><li>Two</li></ul>\n</div>",
    "<div><pre>  keep\n    this </pre><textarea> a\n b</textarea></div>",
    '<form action="/go" method=post><input type="text" name="q" disabled><button>Go</button></form>',
    "<section><!-- note --><p>a <i>b</i> c</p><br><img src=x.png alt=''></section>",
    "<div><script>if (a < b) { go(); }</script><style>p { margin: 0 }</style></div>",
    "<article>Hi <my-tag>x</my-tag> <del>old</del><h2>T</h2>\n<p>Hello<b>World</b>!</p></article>",
]


# --- Beautify ---

def test_void_element_gets_self_closing_slash():
    """<br> wordt <br /> met self_close_tags."""
    assert beautify("<br>") == "<br />"
    assert beautify("<br>", self_close_tags=False) == "<br>"


def test_nested_elements_are_indented():
    html = "<div><p>Hi</p><ul><li>One</li><li>Two</li></ul></div>"
    assert beautify(html) == (
        "<div>\n"
        "  <p>Hi</p>\n"
        "  <ul>\n"
        "    <li>One</li>\n"
        "    <li>Two</li>\n"
        "  </ul>\n"
        "</div>"
    )


def test_document_with_doctype():
    assert beautify(VALID_DOCUMENTS[0]) == (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <head>\n"
        "    <title>T</title>\n"
        "  </head>\n"
        "  <body>\n"
        "    <p>x</p>\n"
        "  </body>\n"
        "</html>"
    )


def test_tab_indentation():
    assert beautify("<div><p>Hi</p></div>", indent_char="tab", indent_size=1) == "<div>\n\t<p>Hi</p>\n</div>"


def test_duplicate_attribute_uses_last_value():
    assert beautify('<div  id="a"  id="b">x</div>') == '<div id="b">x</div>'


def test_sort_attributes():
    html = '<a href="x" class="y" Data-k=1>k</a>'
    assert beautify(html, sort_attributes=True) == '<a class="y" Data-k=1 href="x">k</a>'
    assert beautify(html) == '<a href="x" class="y" Data-k=1>k</a>'


def test_leaf_text_is_collapsed():
    assert beautify("<p>\n   Hello   \n  world\n</p>") == "<p>Hello world</p>"


def test_non_breaking_space_is_content():
    assert beautify("<p>\u00a0x\u00a0</p>") == "<p>\u00a0x\u00a0</p>"
    assert beautify("<p> x </p>") == "<p>x</p>"


def test_verbatim_content_is_not_reindented():
    html = "<div><pre>  a\n   b</pre></div>"
    assert beautify(html) == "<div>\n  <pre>  a\n   b</pre>\n</div>"


def test_comments_preserved_or_dropped():
    html = "<div><!-- c --><p>x</p></div>"
    assert beautify(html) == "<div>\n  <!-- c -->\n  <p>x</p>\n</div>"
    assert beautify(html, preserve_comments=False) == "<div>\n  <p>x</p>\n</div>"


def test_preserve_empty_lines():
    html = "<div>\n<p>a</p>\n\n\n<p>b</p>\n</div>"
    assert beautify(html, preserve_empty_lines=True) == "<div>\n  <p>a</p>\n\n  <p>b</p>\n</div>"
    assert beautify(html) == "<div>\n  <p>a</p>\n  <p>b</p>\n</div>"


def test_slash_closed_non_void_element():
    assert beautify("<div/>") == "<div />"
    assert beautify("<div/>", self_close_tags=False) == "<div></div>"


def test_long_tags_wrap_their_attributes():
    html = '<div id="alpha" class="beta gamma">x</div>'
    assert beautify(html, max_line_length=20) == '<div\n  id="alpha"\n  class="beta gamma">x</div>'
    assert beautify(html, max_line_length=0) == html


def test_invalid_input_is_still_formatted():
    """Ook structureel ongeldige HTML wordt (best effort) geformatteerd."""
    assert beautify("<div><p>Hi</div>") == "<div>\n  <p>\n    Hi\n</div>"
    assert beautify("</span><p>x</p>") == "</span>\n<p>x</p>"


def test_trailing_spaces_are_removed():
    output = beautify("<div>\n<p>a</p>   \n</div>")
    assert all(line == line.rstrip() for line in output.splitlines())


def test_inline_markup_stays_on_the_text_line():
    """Inline elementen blijven in de tekstregel, zodat er geen spaties bijkomen."""
    assert beautify("<p>Hello<b>World</b>!</p>") == "<p>Hello<b>World</b>!</p>"
    assert beautify("<div>Hi <my-tag>x</my-tag><p>y</p></div>") == (
        "<div>\n"
        "  Hi <my-tag>x</my-tag>\n"
        "  <p>y</p>\n"
        "</div>"
    )


def test_inline_element_around_block_content_is_indented():
    assert beautify("<a href=x><div>y</div></a>") == "<a href=x>\n  <div>y</div>\n</a>"


# --- Minify ---

def test_minify_drops_comments():
    """<!-- note --><h1>Title</h1> wordt <h1>Title</h1>."""
    assert minify("<!-- note --><h1>Title</h1>", preserve_comments=False) == "<h1>Title</h1>"


def test_minify_collapses_block_whitespace():
    html = "<div>\n  <p>  Hello   world </p>\n</div>"
    assert minify(html) == "<div><p>Hello world</p></div>"


def test_minify_keeps_spaces_between_inline_elements():
    assert minify("<p><b>a</b> <i>b</i></p>") == "<p><b>a</b> <i>b</i></p>"
    assert minify("<p>Hello   <b>World</b>  !</p>") == "<p>Hello <b>World</b> !</p>"


@pytest.mark.parametrize("html", [
    "<p><del>old</del> <ins>new</ins></p>",
    "<p>Hello <font>x</font></p>",
    "<p><my-tag>a</my-tag> <my-tag>b</my-tag></p>",
])
def test_minify_keeps_spaces_next_to_any_non_block_element(html):
    """Ook onbekende en custom elementen zijn inline: woorden plakken niet aan elkaar."""
    assert minify(html) == html


def test_minify_drops_spaces_next_to_block_elements():
    assert minify("<ul> <li>a</li> <li>b</li> </ul>") == "<ul><li>a</li><li>b</li></ul>"
    assert minify("<span>a</span> <div>b</div>") == "<span>a</span><div>b</div>"


def test_minify_keeps_verbatim_content():
    assert minify("<div> <pre> a  b </pre> </div>") == "<div><pre> a  b </pre></div>"


def test_minify_merges_text_around_removed_comments():
    assert minify("<p>a <!-- x --> b</p>", preserve_comments=False) == "<p>a b</p>"


def test_minify_void_elements():
    assert minify("<img src=a.png>") == "<img src=a.png />"
    assert minify("<img src=a.png>", self_close_tags=False) == "<img src=a.png>"


# --- Properties ---

@pytest.mark.parametrize("html", VALID_DOCUMENTS)
def test_minify_is_idempotent(html):
    once = minify(html)
    assert minify(once) == once


@pytest.mark.parametrize("html", VALID_DOCUMENTS)
def test_beautify_is_a_fixed_point(html):
    """Tweemaal beautify geeft hetzelfde resultaat als éénmaal."""
    once = beautify(html)
    assert beautify(once) == once


@pytest.mark.parametrize("html", VALID_DOCUMENTS)
@pytest.mark.parametrize("mode", ["beautify", "minify"])
def test_element_sequence_matches_independent_parser(html, mode):
    """BeautifulSoup als onafhankelijk orakel: de reeks elementen blijft gelijk."""
    output = FormatService(FormatOptions(mode=mode)).format(tokenize(html))

    def names(markup):
        return [tag.name for tag in BeautifulSoup(markup, "html.parser").find_all(True)]

    assert names(output) == names(html)


def test_compiled_options_are_cached():
    options = FormatOptions(indent_size=4, indent_char="space")
    assert compile_options(options) is compile_options(FormatOptions(indent_size=4))
    assert compile_options(options).indent_unit == "    "
