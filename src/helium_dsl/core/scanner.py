"""Lexical helpers for Helium DSL source.

Two layers live here. The line helpers (``in_literal_at``, ``comment_start``,
``brace_delta``) answer questions about a single line and keep no state
between calls. ``tokenize`` is a small document lexer whose token stream the
lint rules, the symbol table builder and the workspace index consume, so none
of them have to re-derive string, comment or block-literal boundaries.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

BLOCK_OPEN = "/%"
BLOCK_CLOSE = "%/"

_LINE_BREAK = re.compile(r"\r?\n")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER = re.compile(r"\d+(?:\.\d+)?")

_TWO_CHAR_OPS = frozenset({"==", "!=", "<=", ">=", "&&", "||", "+=", "-=", "*=", "/=", "%=", "++", "--"})


def split_lines(text: str) -> list[str]:
    return _LINE_BREAK.split(text)


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------


class _LiteralTracker:
    """Left-to-right string/block-literal state for one line."""

    __slots__ = ("escape_next", "in_block", "in_double", "in_single")

    def __init__(self) -> None:
        self.in_double = False
        self.in_single = False
        self.in_block = False
        self.escape_next = False

    @property
    def inside(self) -> bool:
        return self.in_double or self.in_single or self.in_block

    def step(self, line: str, i: int) -> int:
        """Consume the character at ``i`` and return the next index to read."""
        ch = line[i]
        if self.escape_next:
            self.escape_next = False
            return i + 1
        if ch == "\\":
            self.escape_next = True
            return i + 1
        if not (self.in_double or self.in_single):
            if line.startswith(BLOCK_OPEN, i):
                self.in_block = True
                return i + 2
            if line.startswith(BLOCK_CLOSE, i):
                self.in_block = False
                return i + 2
        if not self.in_block:
            if ch == '"' and not self.in_single:
                self.in_double = not self.in_double
            elif ch == "'" and not self.in_double:
                self.in_single = not self.in_single
        return i + 1


def in_literal_at(line: str, offset: int) -> bool:
    """Return True when ``offset`` falls inside a quoted string or a block literal."""
    tracker = _LiteralTracker()
    i = 0
    limit = min(offset, len(line))
    while i < limit:
        i = tracker.step(line, i)
    return tracker.inside


def comment_start(line: str) -> int | None:
    """Column of the first ``//`` outside string and block literals, if any."""
    tracker = _LiteralTracker()
    i = 0
    while i < len(line):
        if not tracker.inside and not tracker.escape_next and line.startswith("//", i):
            return i
        i = tracker.step(line, i)
    return None


def is_comment_line(line: str) -> bool:
    trimmed = line.strip()
    return trimmed.startswith(("//", "/*", "*/", "*"))


def has_block_literal_marker(line: str) -> bool:
    return BLOCK_OPEN in line or BLOCK_CLOSE in line


def brace_delta(line: str) -> int:
    """Opening minus closing braces on ``line``, ignoring literals and trailing comments."""
    tracker = _LiteralTracker()
    delta = 0
    i = 0
    end = comment_start(line)
    limit = len(line) if end is None else end
    while i < limit:
        if not tracker.inside and not tracker.escape_next:
            if line[i] == "{":
                delta += 1
            elif line[i] == "}":
                delta -= 1
        i = tracker.step(line, i)
    return delta


# ---------------------------------------------------------------------------
# Document lexer
# ---------------------------------------------------------------------------


class TokenKind(str, Enum):
    IDENT = "ident"
    NUMBER = "number"
    STRING = "string"
    BLOCK_LITERAL = "block_literal"
    COMMENT = "comment"
    OP = "op"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int
    column: int
    end_line: int
    end_column: int

    def is_op(self, *texts: str) -> bool:
        return self.kind is TokenKind.OP and self.text in texts

    def is_word(self, *texts: str) -> bool:
        return self.kind is TokenKind.IDENT and (not texts or self.text in texts)


@dataclass
class _OpenSpan:
    kind: TokenKind
    closer: str
    line: int
    column: int
    parts: list[str]

    def close(self, end_line: int, end_column: int) -> Token:
        return Token(self.kind, "\n".join(self.parts), self.line, self.column, end_line, end_column)


def _string_end(line: str, start: int) -> int:
    quote = line[start]
    i = start + 1
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return len(line)


def tokenize(text: str) -> list[Token]:
    """Lex ``text`` into tokens; comments and block literals may span lines."""
    tokens: list[Token] = []
    lines = split_lines(text)
    open_span: _OpenSpan | None = None

    for line_no, line in enumerate(lines):
        col = 0
        if open_span is not None:
            close = line.find(open_span.closer)
            if close == -1:
                open_span.parts.append(line)
                continue
            open_span.parts.append(line[: close + 2])
            tokens.append(open_span.close(line_no, close + 2))
            open_span = None
            col = close + 2

        while col < len(line):
            ch = line[col]
            if ch.isspace():
                col += 1
                continue

            pair = line[col : col + 2]
            if pair == "//":
                tokens.append(Token(TokenKind.COMMENT, line[col:], line_no, col, line_no, len(line)))
                break
            if pair in ("/*", BLOCK_OPEN):
                kind = TokenKind.COMMENT if pair == "/*" else TokenKind.BLOCK_LITERAL
                closer = "*/" if pair == "/*" else BLOCK_CLOSE
                close = line.find(closer, col + 2)
                if close == -1:
                    open_span = _OpenSpan(kind, closer, line_no, col, [line[col:]])
                    break
                tokens.append(Token(kind, line[col : close + 2], line_no, col, line_no, close + 2))
                col = close + 2
                continue

            if ch in "\"'":
                end = _string_end(line, col)
                tokens.append(Token(TokenKind.STRING, line[col:end], line_no, col, line_no, end))
                col = end
                continue

            match = _IDENT.match(line, col) or _NUMBER.match(line, col)
            if match is not None:
                kind = TokenKind.NUMBER if ch.isdigit() else TokenKind.IDENT
                tokens.append(Token(kind, match.group(), line_no, col, line_no, match.end()))
                col = match.end()
                continue

            op = pair if pair in _TWO_CHAR_OPS else ch
            tokens.append(Token(TokenKind.OP, op, line_no, col, line_no, col + len(op)))
            col += len(op)

    if open_span is not None:
        last = len(lines) - 1
        tokens.append(open_span.close(last, len(lines[last])))
    return tokens


def code_tokens(tokens: Iterable[Token]) -> list[Token]:
    return [tok for tok in tokens if tok.kind is not TokenKind.COMMENT]


def group_by_line(tokens: Iterable[Token]) -> dict[int, list[Token]]:
    grouped: dict[int, list[Token]] = defaultdict(list)
    for tok in tokens:
        grouped[tok.line].append(tok)
    return dict(grouped)
