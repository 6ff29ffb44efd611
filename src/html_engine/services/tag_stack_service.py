# src/html_engine/services/tag_stack_service.py
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from html_engine.elements import DEPRECATED_ELEMENTS, VOID_ELEMENTS
from html_engine.model import (
    DEPRECATED_ELEMENT,
    MALFORMED_TAG,
    MISMATCHED_CLOSE,
    SELF_CLOSING_NON_VOID,
    UNCLOSED_COMMENT,
    UNCLOSED_TAG,
    Diagnostic,
    Position,
    Severity,
    StackEntry,
    Token,
    TokenKind,
)
from html_engine.services.report_service import ReportService

logger = logging.getLogger(__name__)


class TagStackService:
    """
    Validates the nesting of a token stream with an explicit stack of open
    elements. A pure function of its input: a new instance per run.
    """

    def __init__(self) -> None:
        self.stack: List[StackEntry] = []
        self.diagnostics: List[Diagnostic] = []

    def _report(self, severity: Severity, code: str, message: str, position: Position) -> None:
        self.diagnostics.append(Diagnostic(severity=severity, code=code, message=message, position=position))

    # -------- Token handlers --------

    def _on_open(self, token: Token) -> None:
        name = token.tag_name
        self.diagnostics.extend(token.attribute_diagnostics)

        if not token.terminated:
            self._report("error", MALFORMED_TAG, f"Tag <{token.name}> is missing its closing '>'", token.position)
        if name in DEPRECATED_ELEMENTS:
            self._report("warning", DEPRECATED_ELEMENT, f"Element <{token.name}> is deprecated in HTML5",
                         token.position)
        if token.slash_closed and name not in VOID_ELEMENTS:
            # Permissive: <div/> counts as opened and closed at once.
            self._report("warning", SELF_CLOSING_NON_VOID,
                         f"Self-closing syntax on non-void element <{token.name}>; treated as <{token.name}></{token.name}>",
                         token.position)

        if token.self_closing:
            return
        self.stack.append(StackEntry(tag_name=name, open_token=token))

    def _find_open(self, name: str) -> Optional[int]:
        """Index of the topmost open element named `name`, or None."""
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index].tag_name == name:
                return index
        return None

    def _on_close(self, token: Token) -> None:
        name = token.tag_name
        if not token.terminated:
            self._report("error", MALFORMED_TAG, f"Closing tag </{token.name}> is missing its closing '>'",
                         token.position)

        index = self._find_open(name)
        if index is None:
            if name in VOID_ELEMENTS:
                message = f"Closing tag </{token.name}> is not allowed for void element <{name}>"
            else:
                message = f"Unexpected closing tag </{token.name}> with no matching opening tag"
            self._report("error", MISMATCHED_CLOSE, message, token.position)
            return

        # Everything above the match was never closed explicitly.
        for entry in self.stack[index + 1:]:
            self._report("error", UNCLOSED_TAG,
                         f"Unclosed tag <{entry.open_token.name}> (implicitly closed by </{token.name}>)",
                         entry.open_token.position)
        del self.stack[index:]

    def _on_other(self, token: Token) -> None:
        if token.terminated:
            return
        if token.kind == TokenKind.COMMENT:
            self._report("error", UNCLOSED_COMMENT, "Comment is never closed with '-->'", token.position)
        elif token.kind == TokenKind.DOCTYPE:
            self._report("error", MALFORMED_TAG, "Doctype declaration is missing its closing '>'", token.position)

    # -------- Entry point --------

    def validate(self, tokens: List[Token]) -> Tuple[List[Diagnostic], List[Diagnostic]]:
        """
        Walks the tokens and returns (errors, warnings), each sorted by line and column.
        """
        for token in tokens:
            if token.kind == TokenKind.TAG_OPEN:
                self._on_open(token)
            elif token.kind == TokenKind.TAG_CLOSE:
                self._on_close(token)
            else:
                self._on_other(token)

        for entry in self.stack:
            self._report("error", UNCLOSED_TAG, f"Unclosed tag <{entry.open_token.name}>", entry.open_token.position)

        errors, warnings = ReportService.split(self.diagnostics)
        logger.debug("Validation finished: %d error(s), %d warning(s).", len(errors), len(warnings))
        return errors, warnings


def validate_tokens(tokens: List[Token]) -> Tuple[List[Diagnostic], List[Diagnostic]]:
    """Runs a fresh TagStackService over `tokens`."""
    return TagStackService().validate(tokens)
