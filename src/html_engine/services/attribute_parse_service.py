# src/html_engine/services/attribute_parse_service.py
from __future__ import annotations

import logging
from typing import Dict, List, NamedTuple, Optional, Tuple

from html_engine.model import (
    DUPLICATE_ATTRIBUTE,
    MALFORMED_ATTRIBUTE,
    Attribute,
    Diagnostic,
    Position,
    QuoteStyle,
)

logger = logging.getLogger(__name__)

WHITESPACE = " \t\n\r\f"
# Characters that may not appear inside an attribute name.
_ILLEGAL_NAME_CHARS = "\"'<`"
_QUOTES: Dict[str, QuoteStyle] = {'"': "double", "'": "single"}


class AttributeScan(NamedTuple):
    """Outcome of scanning the attribute area of an opening tag."""
    end: int
    terminated: bool
    slash_closed: bool
    attributes: List[Attribute]
    diagnostics: List[Diagnostic]


def _skip_whitespace(source: str, i: int) -> int:
    n = len(source)
    while i < n and source[i] in WHITESPACE:
        i += 1
    return i


def _read_value(source: str, i: int) -> Tuple[str, QuoteStyle, int, Optional[str]]:
    """
    Reads an attribute value starting at `i` (just past '=' and whitespace).

    Returns (value, quote, next_index, problem) where problem is None,
    'missing' or 'unterminated'.
    """
    n = len(source)
    if i >= n or source[i] == ">":
        return "", "none", i, "missing"

    ch = source[i]
    if ch in _QUOTES:
        close = source.find(ch, i + 1)
        if close == -1:
            # Unclosed quote: the value runs to the next '>' or end-of-input.
            gt = source.find(">", i + 1)
            end = gt if gt != -1 else n
            return source[i + 1:end], _QUOTES[ch], end, "unterminated"
        return source[i + 1:close], _QUOTES[ch], close + 1, None

    k = i
    while k < n and source[k] not in WHITESPACE and source[k] != ">":
        k += 1
    # `data-x=1/>`: leave the slash to mark the tag as self-closing.
    if k < n and source[k] == ">" and k - 1 > i and source[k - 1] == "/":
        k -= 1
    return source[i:k], "none", k, None


def scan_attributes(
        source: str,
        start: int,
        tag_start: Position,
        tag_name: Optional[str] = None,
) -> AttributeScan:
    """
    Scans attributes from `source[start:]` until the first '>' outside a
    quoted value, or end-of-input.

    Args:
        source (str): The text to scan (the full document when called by the lexer).
        start (int): Index just past the tag name.
        tag_start (Position): Position used for every diagnostic raised here.
        tag_name (Optional[str]): Used in diagnostic messages only.

    Returns:
        AttributeScan: End index (exclusive), whether a '>' was found, whether
        the tag ended with '/>', the de-duplicated attributes and diagnostics.
    """
    label = f"<{tag_name}>" if tag_name else "tag"
    collected: Dict[str, Attribute] = {}
    diagnostics: List[Diagnostic] = []
    slash_closed = False
    n = len(source)
    i = start

    def _report(severity, code: str, message: str) -> None:
        diagnostics.append(Diagnostic(severity=severity, code=code, message=message, position=tag_start))

    while True:
        i = _skip_whitespace(source, i)
        if i >= n:
            return AttributeScan(n, False, slash_closed, list(collected.values()), diagnostics)

        ch = source[i]
        if ch == ">":
            return AttributeScan(i + 1, True, slash_closed, list(collected.values()), diagnostics)
        if ch == "/":
            i += 1
            slash_closed = i < n and source[i] == ">"
            continue
        slash_closed = False

        name_start = i
        while i < n and source[i] not in WHITESPACE and source[i] not in "=/>":
            i += 1
        name = source[name_start:i]

        value: Optional[str] = None
        quote: QuoteStyle = "none"
        j = _skip_whitespace(source, i)
        if j < n and source[j] == "=":
            i = _skip_whitespace(source, j + 1)
            value, quote, i, problem = _read_value(source, i)
            if problem == "unterminated":
                _report("error", MALFORMED_ATTRIBUTE,
                        f'Unterminated quote in value of attribute "{name}" on {label}')
            elif problem == "missing":
                _report("error", MALFORMED_ATTRIBUTE,
                        f'Attribute "{name}" on {label} is missing a value after "="')

        if not name:
            _report("error", MALFORMED_ATTRIBUTE, f"Attribute value without a name on {label}")
            continue

        if any(c in _ILLEGAL_NAME_CHARS for c in name):
            _report("error", MALFORMED_ATTRIBUTE, f'Invalid attribute name "{name}" on {label}')

        attr = Attribute(name=name, value=value, quote=quote)
        if attr.key in collected:
            _report("warning", DUPLICATE_ATTRIBUTE,
                    f'Duplicate attribute "{name}" on {label}; the last value wins')
        # Re-assigning an existing key keeps its original slot.
        collected[attr.key] = attr


def parse_attributes(
        raw: str,
        tag_start: Position,
        tag_name: Optional[str] = None,
) -> Tuple[List[Attribute], List[Diagnostic]]:
    """Splits a raw attribute blob (text after the tag name) into attributes and diagnostics."""
    scan = scan_attributes(raw, 0, tag_start, tag_name)
    if scan.diagnostics:
        logger.debug("Attribute blob at %s produced %d diagnostic(s).", tag_start, len(scan.diagnostics))
    return scan.attributes, scan.diagnostics
