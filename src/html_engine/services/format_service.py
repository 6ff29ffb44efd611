# src/html_engine/services/format_service.py
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import List, NamedTuple, Optional, Tuple

from html_engine.elements import VERBATIM_ELEMENTS, VOID_ELEMENTS, is_block
from html_engine.model import Attribute, FormatOptions, Token, TokenKind

logger = logging.getLogger(__name__)

# HTML whitespace only; a non-breaking space is content.
_HTML_WS = re.compile(r"[ \t\n\r\f]+")
_HTML_WS_CHARS = " \t\n\r\f"
_TRAILING_BLANKS = re.compile(r"[ \t]+$", re.MULTILINE)


class CompiledOptions(NamedTuple):
    indent_unit: str
    self_close_suffix: str


@lru_cache(maxsize=64)
def compile_options(options: FormatOptions) -> CompiledOptions:
    """Derives the strings the formatter needs. Cached per (frozen, hashable) options."""
    char = "\t" if options.indent_char == "tab" else " "
    suffix = " />" if options.self_close_tags else ">"
    return CompiledOptions(indent_unit=char * options.indent_size, self_close_suffix=suffix)


def _collapse(text: str) -> str:
    return _HTML_WS.sub(" ", text)


def _render_attribute(attr: Attribute) -> str:
    if attr.value is None:
        return attr.name
    if attr.quote == "single":
        return f"{attr.name}='{attr.value}'"
    if attr.quote == "none" and attr.value:
        return f"{attr.name}={attr.value}"
    return f'{attr.name}="{attr.value}"'


class FormatService:
    """
    Renders a token stream as indented markup (beautify) or as compact
    markup (minify). Works on any token stream, valid or not.
    """

    def __init__(self, options: Optional[FormatOptions] = None):
        self.options = options or FormatOptions()
        self.compiled = compile_options(self.options)

    # -------- Shared helpers --------

    def _prepare(self, tokens: List[Token]) -> List[Token]:
        """Drops comments when they are not preserved and merges the text around them."""
        prepared: List[Token] = []
        for token in tokens:
            if token.kind == TokenKind.COMMENT and not self.options.preserve_comments:
                continue
            if token.kind == TokenKind.TEXT and prepared and prepared[-1].kind == TokenKind.TEXT:
                previous = prepared[-1]
                prepared[-1] = previous.model_copy(update={"raw": previous.raw + token.raw})
                continue
            prepared.append(token)
        return prepared

    def render_open_tag(self, token: Token, indent: str = "", wrap: bool = False) -> str:
        attributes = token.attributes
        if self.options.sort_attributes:
            attributes = sorted(attributes, key=lambda a: a.key)
        parts = [_render_attribute(a) for a in attributes]

        if not token.self_closing:
            end = ">"
        elif self.options.self_close_tags or token.tag_name in VOID_ELEMENTS:
            end = self.compiled.self_close_suffix
        else:
            # <div/> without self-closing output must stay an empty element.
            end = f"></{token.name}>"

        single_line = f"<{token.name}" + "".join(" " + p for p in parts) + end
        limit = self.options.max_line_length
        if wrap and limit and len(parts) > 1 and len(indent) + len(single_line) > limit:
            inner = indent + (self.compiled.indent_unit or " ")
            return f"<{token.name}" + "".join("\n" + inner + p for p in parts) + end
        return single_line

    @staticmethod
    def _collect_verbatim(tokens: List[Token], start: int) -> Tuple[str, int]:
        """
        Returns the untouched source of an element's content plus its closing
        tag, and the index after it. Nested same-name elements are counted.
        """
        name = tokens[start].tag_name
        depth = 1
        parts: List[str] = []
        index = start + 1
        while index < len(tokens):
            token = tokens[index]
            if token.kind == TokenKind.TAG_OPEN and token.tag_name == name and not token.self_closing:
                depth += 1
            elif token.kind == TokenKind.TAG_CLOSE and token.tag_name == name:
                depth -= 1
                if depth == 0:
                    return "".join(parts) + f"</{token.name}>", index + 1
            parts.append(token.raw)
            index += 1
        return "".join(parts), index

    # -------- Beautify --------

    @staticmethod
    def _blank(lines: List[str]) -> None:
        if lines and lines[-1] != "":
            lines.append("")

    @staticmethod
    def _starts_inline(token: Token) -> bool:
        if token.kind == TokenKind.TEXT:
            return True
        return (token.kind == TokenKind.TAG_OPEN and not is_block(token.tag_name)
                and token.tag_name not in VERBATIM_ELEMENTS)

    def _inline_run(self, tokens: List[Token], start: int) -> Tuple[str, int]:
        """
        Renders the longest balanced stretch of text and inline elements
        beginning at `start` as one string. Returns (markup, end_index);
        end_index == start when no such stretch exists.
        """
        open_inline: List[str] = []
        parts: List[str] = []
        end, end_length = start, 0
        index = start
        while index < len(tokens):
            token = tokens[index]
            if token.kind == TokenKind.TEXT:
                parts.append(_collapse(token.raw))
            elif token.kind == TokenKind.TAG_OPEN and self._starts_inline(token):
                parts.append(self.render_open_tag(token))
                if not token.self_closing:
                    open_inline.append(token.tag_name)
            elif token.kind == TokenKind.TAG_CLOSE and open_inline and open_inline[-1] == token.tag_name:
                parts.append(f"</{token.name}>")
                open_inline.pop()
            else:
                break
            index += 1
            if not open_inline:
                end, end_length = index, len(parts)
        return "".join(parts[:end_length]).strip(" "), end

    def _beautify_run(self, tokens: List[Token], start: int, indent: str, lines: List[str]) -> int:
        """Emits an inline run on one line; returns the index after it (start if none)."""
        content, end = self._inline_run(tokens, start)
        if end == start:
            return start
        preserve = self.options.preserve_empty_lines
        first, last = tokens[start], tokens[end - 1]

        if preserve and first.kind == TokenKind.TEXT:
            leading = first.raw[:len(first.raw) - len(first.raw.lstrip(_HTML_WS_CHARS))]
            if leading.count("\n") >= 2:
                self._blank(lines)
        if not content:
            return end

        lines.append(indent + content)
        if preserve and last.kind == TokenKind.TEXT:
            trailing = last.raw[len(last.raw.rstrip(_HTML_WS_CHARS)):]
            if trailing.count("\n") >= 2:
                self._blank(lines)
        return end

    def _single_line(self, tokens: List[Token], start: int) -> Optional[Tuple[str, Token, int]]:
        """
        Detects an element whose whole content is text and inline markup:
        returns (content, close_token, next_index) or None.
        """
        name = tokens[start].tag_name
        content, index = self._inline_run(tokens, start + 1)
        if index < len(tokens) and tokens[index].kind == TokenKind.TAG_CLOSE and tokens[index].tag_name == name:
            return content, tokens[index], index + 1
        return None

    def beautify(self, tokens: List[Token]) -> str:
        tokens = self._prepare(tokens)
        unit = self.compiled.indent_unit
        lines: List[str] = []
        open_names: List[str] = []
        index = 0

        while index < len(tokens):
            token = tokens[index]
            indent = unit * len(open_names)

            if self._starts_inline(token):
                after = self._beautify_run(tokens, index, indent, lines)
                if after > index:
                    index = after
                    continue

            if token.kind == TokenKind.TAG_OPEN:
                rendered = self.render_open_tag(token, indent, wrap=True)
                if token.self_closing:
                    lines.append(indent + rendered)
                    index += 1
                elif token.tag_name in VERBATIM_ELEMENTS:
                    body, index = self._collect_verbatim(tokens, index)
                    lines.append(indent + rendered + body)
                else:
                    single = self._single_line(tokens, index)
                    if single is not None:
                        content, close, index = single
                        lines.append(f"{indent}{rendered}{content}</{close.name}>")
                    else:
                        lines.append(indent + rendered)
                        open_names.append(token.tag_name)
                        index += 1
                continue

            if token.kind == TokenKind.TAG_CLOSE:
                name = token.tag_name
                if name in open_names:
                    position = len(open_names) - 1 - open_names[::-1].index(name)
                    del open_names[position:]
                # A stray closing tag is kept where it is and changes nothing.
                lines.append(unit * len(open_names) + f"</{token.name}>")
            elif token.kind == TokenKind.COMMENT:
                lines.append(indent + token.raw)
            elif token.kind == TokenKind.DOCTYPE:
                lines.append(indent + _collapse(token.raw))
            index += 1

        while lines and lines[-1] == "":
            lines.pop()

        output = "\n".join(lines)
        if self.options.remove_trailing_spaces:
            output = _TRAILING_BLANKS.sub("", output)
        return output

    # -------- Minify --------

    @staticmethod
    def _keeps_space(token: Optional[Token]) -> bool:
        """Whitespace separates words unless it touches a block element or the document edge."""
        if token is None or token.kind == TokenKind.DOCTYPE:
            return False
        return not (token.is_tag and is_block(token.tag_name))

    def _minify_text(self, raw: str, previous: Optional[Token], following: Optional[Token]) -> str:
        collapsed = _collapse(raw)
        core = collapsed.strip(" ")
        if not core:
            return " " if self._keeps_space(previous) and self._keeps_space(following) else ""
        lead = " " if collapsed.startswith(" ") and self._keeps_space(previous) else ""
        trail = " " if collapsed.endswith(" ") and self._keeps_space(following) else ""
        return lead + core + trail

    def minify(self, tokens: List[Token]) -> str:
        tokens = self._prepare(tokens)
        out: List[str] = []
        index = 0

        while index < len(tokens):
            token = tokens[index]
            if token.kind == TokenKind.TAG_OPEN:
                out.append(self.render_open_tag(token))
                if not token.self_closing and token.tag_name in VERBATIM_ELEMENTS:
                    body, index = self._collect_verbatim(tokens, index)
                    out.append(body)
                    continue
            elif token.kind == TokenKind.TAG_CLOSE:
                out.append(f"</{token.name}>")
            elif token.kind == TokenKind.TEXT:
                previous = tokens[index - 1] if index > 0 else None
                following = tokens[index + 1] if index + 1 < len(tokens) else None
                out.append(self._minify_text(token.raw, previous, following))
            elif token.kind == TokenKind.COMMENT:
                out.append(token.raw)
            elif token.kind == TokenKind.DOCTYPE:
                out.append(_collapse(token.raw))
            index += 1

        return "".join(out)

    # -------- Entry point --------

    def format(self, tokens: List[Token]) -> str:
        if self.options.mode == "minify":
            output = self.minify(tokens)
        else:
            output = self.beautify(tokens)
        logger.debug("Formatted %d tokens (%s) into %d characters.", len(tokens), self.options.mode, len(output))
        return output
