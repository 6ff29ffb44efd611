# ============================================
# file: src/html_engine/model.py
# ============================================
from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# --- Diagnostic codes ---
UNCLOSED_TAG = "UNCLOSED_TAG"
MISMATCHED_CLOSE = "MISMATCHED_CLOSE"
UNCLOSED_COMMENT = "UNCLOSED_COMMENT"
MALFORMED_TAG = "MALFORMED_TAG"
MALFORMED_ATTRIBUTE = "MALFORMED_ATTRIBUTE"
DUPLICATE_ATTRIBUTE = "DUPLICATE_ATTRIBUTE"
SELF_CLOSING_NON_VOID = "SELF_CLOSING_NON_VOID"
DEPRECATED_ELEMENT = "DEPRECATED_ELEMENT"

Severity = Literal["error", "warning"]
QuoteStyle = Literal["double", "single", "none"]


class TokenKind(str, Enum):
    TAG_OPEN = "tag_open"
    TAG_CLOSE = "tag_close"
    TEXT = "text"
    COMMENT = "comment"
    DOCTYPE = "doctype"


class Position(BaseModel):
    """1-based line and column of a token start."""
    model_config = ConfigDict(frozen=True)

    line: int = 1
    column: int = 1


class Attribute(BaseModel):
    name: str
    value: Optional[str] = None
    quote: QuoteStyle = "none"

    @property
    def key(self) -> str:
        """Lowercased name, used for comparisons and sorting."""
        return self.name.lower()


class Diagnostic(BaseModel):
    """A single validation finding with a stable code and a source position."""
    severity: Severity
    code: str
    message: str
    position: Position

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    @property
    def sort_key(self) -> Tuple[int, int]:
        return self.position.line, self.position.column


class Token(BaseModel):
    """
    One lexical unit of HTML. `raw` is the exact source slice, so joining
    the raw text of a token list reproduces the input.
    """
    kind: TokenKind
    raw: str
    position: Position
    name: Optional[str] = None
    attributes: List[Attribute] = Field(default_factory=list)
    self_closing: bool = False
    slash_closed: bool = False
    terminated: bool = True
    attribute_diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def tag_name(self) -> str:
        return (self.name or "").lower()

    @property
    def is_tag(self) -> bool:
        return self.kind in (TokenKind.TAG_OPEN, TokenKind.TAG_CLOSE)


class StackEntry(BaseModel):
    """Runtime state of the tag-stack validator: one currently open element."""
    tag_name: str
    open_token: Token


class FormatOptions(BaseModel):
    """
    Formatter settings. Frozen so instances are hashable (they key the
    compiled-options cache) and strict about unknown keys.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Literal["beautify", "minify"] = "beautify"
    indent_size: int = Field(default=2, ge=0)
    indent_char: Literal["space", "tab"] = "space"
    preserve_comments: bool = True
    preserve_empty_lines: bool = False
    sort_attributes: bool = False
    remove_trailing_spaces: bool = True
    self_close_tags: bool = True
    max_line_length: int = Field(default=80, ge=0)


class ValidatorOptions(BaseModel):
    """Settings of the HTML5 validator tool (report + optional prettified output)."""
    model_config = ConfigDict(extra="forbid")

    include_warnings: bool = True
    prettify_output: bool = True
    indent_size: int = Field(default=2, ge=0)


class ValidationResult(BaseModel):
    success: bool
    errors: List[Diagnostic] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)
    error: Optional[str] = None


class FormatStats(BaseModel):
    original_size: int
    processed_size: int
    compression_ratio: float
    line_count: int
    errors: List[Diagnostic] = Field(default_factory=list)
    warnings: List[Diagnostic] = Field(default_factory=list)


class FormatResult(BaseModel):
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    stats: Optional[FormatStats] = None


class ValidatorReport(BaseModel):
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    valid: bool = False
    error_count: int = 0
    warning_count: int = 0
    prettified: Optional[str] = None
