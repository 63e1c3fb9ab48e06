from __future__ import annotations

import re
from collections.abc import Sequence

from helium_dsl.core.scanner import Token, comment_start, group_by_line, has_block_literal_marker, is_comment_line
from helium_dsl.lint.config import DOT_NOTATION_LIMIT
from helium_dsl.lint.engine import LintContext

_REGEX_LIKE = re.compile(r"/.*/")
_MIN_SEGMENTS = 3


def _skip_line(line: str) -> bool:
    if is_comment_line(line) or has_block_literal_marker(line):
        return True
    end = comment_start(line)
    code = line if end is None else line[:end]
    return _REGEX_LIKE.search(code) is not None


def _chains(line_tokens: Sequence[Token]) -> list[tuple[Token, Token]]:
    """Return (first, last) identifier tokens of each qualifying dot chain."""
    found: list[tuple[Token, Token]] = []
    i = 0
    while i < len(line_tokens):
        tok = line_tokens[i]
        if not tok.is_word() or (i > 0 and line_tokens[i - 1].is_op(".")):
            i += 1
            continue
        j = i
        segments = 1
        while j + 2 < len(line_tokens) and line_tokens[j + 1].is_op(".") and line_tokens[j + 2].is_word():
            j += 2
            segments += 1
        follower = line_tokens[j + 1] if j + 1 < len(line_tokens) else None
        if segments >= _MIN_SEGMENTS and follower is not None and follower.is_op("=", "(", ";"):
            found.append((tok, line_tokens[j]))
        i = j + 1
    return found


def apply_dot_notation_limit(ctx: LintContext) -> None:
    if not ctx.rules.is_enabled(DOT_NOTATION_LIMIT):
        return

    by_line = group_by_line(ctx.tokens)
    for idx, line in enumerate(ctx.lines):
        if idx not in by_line or _skip_line(line):
            continue
        for first, last in _chains(by_line[idx]):
            ctx.report(DOT_NOTATION_LIMIT, idx, first.column, last.end_column - first.column)
