# src/html_shell/core/handlers/tokenize_handler.py
from __future__ import annotations

import argparse
import json
from typing import List, Optional

from html_engine.controllers.engine_controller import engine
from html_engine.model import TokenKind
from html_shell.core.context.shell_context import ShellContext

tokenize_help_text = """
  tokenize [<file>] [--json]
      Lists the lexical tokens (tags, text, comments, doctype) with their line and column.
""".strip()


def _describe(token) -> str:
    if token.kind in (TokenKind.TAG_OPEN, TokenKind.TAG_CLOSE):
        detail = token.name
        if token.attributes:
            detail += " [" + ", ".join(a.name for a in token.attributes) + "]"
        if token.slash_closed:
            detail += " (self-closed)"
    else:
        detail = repr(token.raw if len(token.raw) <= 40 else token.raw[:37] + "...")
    if not token.terminated:
        detail += " (unterminated)"
    return detail


def handle_tokenize(args: List[str], ctx: ShellContext, stdin: Optional[str] = None) -> int:
    parser = argparse.ArgumentParser(prog="tokenize", description="Show the token stream of an HTML document.")
    parser.add_argument("file", nargs="?", default=None, help="HTML file (defaults to stdin).")
    parser.add_argument("--json", action="store_true", help="Print tokens as JSON.")
    try:
        pargs = parser.parse_args(args)
    except SystemExit:
        return 1

    try:
        html, _label = ctx.load_html(pargs.file, stdin)
    except (OSError, ValueError) as e:
        print(f"❌ Error: {e}")
        return 1

    tokens = engine.tokenize(html)
    if pargs.json:
        payload = [t.model_dump(mode="json", exclude={"attribute_diagnostics"}) for t in tokens]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    for t in tokens:
        print(f"{t.position.line:>5}:{t.position.column:<4} {t.kind.value:<10} {_describe(t)}")
    print(f"✅ {len(tokens)} tokens")
    return 0
