# src/html_engine/services/lexer_service.py
from __future__ import annotations

import logging
import re
from typing import Dict, List, Pattern

from html_engine.elements import RAW_TEXT_ELEMENTS, VOID_ELEMENTS
from html_engine.model import Position, Token, TokenKind
from html_engine.services.attribute_parse_service import WHITESPACE, scan_attributes

logger = logging.getLogger(__name__)

_RAW_TEXT_END: Dict[str, Pattern[str]] = {
    name: re.compile(rf"</{name}(?=[\s/>]|$)", re.IGNORECASE) for name in RAW_TEXT_ELEMENTS
}


def _is_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


class LexerService:
    """
    Converts a raw HTML string into a flat, ordered list of tokens.

    The scan is permissive: it never raises for a string input. Unterminated
    tags, comments and doctypes run to end-of-input and are marked with
    `terminated=False` so the validator can report them.
    """

    def __init__(self, html: str):
        if not isinstance(html, str):
            raise TypeError(f"HTML input must be a string, got {type(html).__name__}.")
        self.html = html
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    # -------- Cursor handling --------

    def _emit(self, kind: TokenKind, end: int, **fields) -> Token:
        """Creates a token for html[pos:end] and advances the cursor past it."""
        raw = self.html[self.pos:end]
        token = Token(kind=kind, raw=raw, position=Position(line=self.line, column=self.column), **fields)
        self.tokens.append(token)

        newlines = raw.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(raw) - raw.rfind("\n")
        else:
            self.column += len(raw)
        self.pos = end
        return token

    def _starts_markup(self, i: int) -> bool:
        html = self.html
        if html[i] != "<" or i + 1 >= len(html):
            return False
        nxt = html[i + 1]
        if _is_letter(nxt) or nxt == "!":
            return True
        return nxt == "/" and i + 2 < len(html) and _is_letter(html[i + 2])

    # -------- States --------

    def _lex_text(self) -> None:
        """Accumulates text until the next '<' that starts a tag, comment or declaration."""
        i = self.pos
        while True:
            lt = self.html.find("<", i)
            if lt == -1:
                self._emit(TokenKind.TEXT, len(self.html))
                return
            if lt > self.pos and self._starts_markup(lt):
                self._emit(TokenKind.TEXT, lt)
                return
            i = lt + 1

    def _lex_declaration(self) -> None:
        """Handles '<!': comments, doctypes and other declarations (emitted as comments)."""
        html, start = self.html, self.pos
        if html.startswith("<!--", start):
            close = html.find("-->", start + 4)
            if close == -1:
                self._emit(TokenKind.COMMENT, len(html), terminated=False)
            else:
                self._emit(TokenKind.COMMENT, close + 3)
            return

        kind = TokenKind.DOCTYPE if html[start + 2:start + 9].lower() == "doctype" else TokenKind.COMMENT
        gt = html.find(">", start + 2)
        if gt == -1:
            self._emit(kind, len(html), terminated=False)
        else:
            self._emit(kind, gt + 1)

    def _lex_close_tag(self) -> None:
        html = self.html
        j = self.pos + 2
        while j < len(html) and html[j] not in WHITESPACE and html[j] not in "/>":
            j += 1
        name = html[self.pos + 2:j]
        gt = html.find(">", j)
        if gt == -1:
            self._emit(TokenKind.TAG_CLOSE, len(html), name=name, terminated=False)
        else:
            self._emit(TokenKind.TAG_CLOSE, gt + 1, name=name)

    def _lex_open_tag(self) -> None:
        html = self.html
        j = self.pos + 1
        while j < len(html) and html[j] not in WHITESPACE and html[j] not in "/>":
            j += 1
        name = html[self.pos + 1:j]
        lowered = name.lower()
        start = Position(line=self.line, column=self.column)

        scan = scan_attributes(html, j, start, name)
        self._emit(
            TokenKind.TAG_OPEN,
            scan.end,
            name=name,
            attributes=scan.attributes,
            self_closing=scan.slash_closed or lowered in VOID_ELEMENTS,
            slash_closed=scan.slash_closed,
            terminated=scan.terminated,
            attribute_diagnostics=scan.diagnostics,
        )

        if lowered in RAW_TEXT_ELEMENTS and scan.terminated and not scan.slash_closed:
            self._lex_raw_text(lowered)

    def _lex_raw_text(self, tag_name: str) -> None:
        """Script/style/textarea content is one opaque text token up to its closing tag."""
        match = _RAW_TEXT_END[tag_name].search(self.html, self.pos)
        end = match.start() if match else len(self.html)
        if end > self.pos:
            self._emit(TokenKind.TEXT, end)

    # -------- Entry point --------

    def tokenize(self) -> List[Token]:
        html = self.html
        n = len(html)
        while self.pos < n:
            if not self._starts_markup(self.pos):
                self._lex_text()
            elif html[self.pos + 1] == "!":
                self._lex_declaration()
            elif html[self.pos + 1] == "/":
                self._lex_close_tag()
            else:
                self._lex_open_tag()

        logger.debug("Tokenized %d characters into %d tokens.", n, len(self.tokens))
        return self.tokens


def tokenize(html: str) -> List[Token]:
    """Convenience wrapper: tokenizes `html` with a fresh LexerService."""
    return LexerService(html).tokenize()
