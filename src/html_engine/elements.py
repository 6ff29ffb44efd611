# src/html_engine/elements.py
"""
Element classification tables shared by the lexer, validator and formatter.
All names are lowercase.
"""
from typing import FrozenSet

# Elements that never have children and are never explicitly closed.
VOID_ELEMENTS: FrozenSet[str] = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

# Content is opaque text up to the matching closing tag.
RAW_TEXT_ELEMENTS: FrozenSet[str] = frozenset({"script", "style", "textarea"})

# Content is emitted exactly as written by the formatter.
VERBATIM_ELEMENTS: FrozenSet[str] = frozenset({"pre", "textarea", "script", "style"})

# Elements laid out as blocks (or not rendered at all). Whitespace next to
# them never separates words; every other element, custom ones included,
# is treated as inline.
BLOCK_ELEMENTS: FrozenSet[str] = frozenset({
    "address", "article", "aside", "base", "blockquote", "body", "canvas",
    "caption", "center", "col", "colgroup", "dd", "details", "dialog", "dir",
    "div", "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form",
    "frame", "frameset", "h1", "h2", "h3", "h4", "h5", "h6", "head", "header",
    "hgroup", "hr", "html", "legend", "li", "link", "main", "menu", "meta",
    "nav", "noframes", "noscript", "ol", "optgroup", "option", "p", "pre",
    "script", "search", "section", "style", "summary", "table", "tbody", "td",
    "template", "tfoot", "th", "thead", "title", "tr", "ul", "video",
})

DEPRECATED_ELEMENTS: FrozenSet[str] = frozenset({
    "acronym", "applet", "basefont", "big", "blink", "center", "dir", "font",
    "frame", "frameset", "isindex", "marquee", "noframes", "strike", "tt",
})


def is_block(tag_name: str) -> bool:
    return tag_name in BLOCK_ELEMENTS
