from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Sequence
from typing import NamedTuple

from helium_dsl.core.scanner import (
    Token,
    TokenKind,
    comment_start,
    has_block_literal_marker,
    in_literal_at,
    is_comment_line,
)
from helium_dsl.lint.config import FORBIDDEN_OPERATORS
from helium_dsl.lint.engine import LintContext

# (start, end) columns; an end of None runs to the end of the line.
_Span = tuple[int, int | None]


class _OperatorCheck(NamedTuple):
    pattern: re.Pattern[str]
    message: str
    literal_aware: bool


_CHECKS = (
    _OperatorCheck(
        re.compile(r"\+=|-=|\*=|/=|%="),
        "Compound assignment is not allowed. Use explicit assignment.",
        literal_aware=False,
    ),
    _OperatorCheck(
        re.compile(r"\b[A-Za-z_][A-Za-z0-9_]*\s*\?\s*[^:]*\s*:"),
        "Ternary operator is not allowed. Use if/else.",
        literal_aware=True,
    ),
    _OperatorCheck(
        re.compile(r"!\s*[A-Za-z_][A-Za-z0-9_]*"),
        "Use '== false' instead of '!var'.",
        literal_aware=True,
    ),
)


def _masked_spans(tokens: Sequence[Token]) -> dict[int, list[_Span]]:
    """Columns covered by block literals and comments, per line."""
    masked: dict[int, list[_Span]] = defaultdict(list)
    for tok in tokens:
        if tok.kind not in (TokenKind.BLOCK_LITERAL, TokenKind.COMMENT):
            continue
        for line in range(tok.line, tok.end_line + 1):
            start = tok.column if line == tok.line else 0
            end = tok.end_column if line == tok.end_line else None
            masked[line].append((start, end))
    return masked


def _is_masked(spans: Sequence[_Span], column: int) -> bool:
    return any(start <= column and (end is None or column < end) for start, end in spans)


def apply_forbidden_operators(ctx: LintContext) -> None:
    if not ctx.rules.is_enabled(FORBIDDEN_OPERATORS):
        return

    masked = _masked_spans(ctx.all_tokens)
    for idx, line in enumerate(ctx.lines):
        if is_comment_line(line):
            continue
        spans = masked.get(idx, [])
        end = comment_start(line)
        code = line if end is None else line[:end]
        block_line = has_block_literal_marker(code)
        for check in _CHECKS:
            for match in check.pattern.finditer(code):
                if _is_masked(spans, match.start()):
                    continue
                if check.literal_aware:
                    if in_literal_at(line, match.start()):
                        continue
                elif block_line:
                    continue
                ctx.report(FORBIDDEN_OPERATORS, idx, match.start(), len(match.group()), check.message)
