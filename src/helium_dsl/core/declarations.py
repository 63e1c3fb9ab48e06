"""Declaration shapes recognized over the code token stream."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from helium_dsl.core.languages import NON_TYPE_WORDS, VALUE_TYPES
from helium_dsl.core.scanner import Token

PASCAL_CASE = re.compile(r"[A-Z][A-Za-z0-9_]*\Z")


@dataclass(frozen=True)
class Declaration:
    start: Token
    name: Token
    end: Token


def _is_lower_start(name: str) -> bool:
    return name[0] == "_" or name[0].islower()


def is_type_name(tok: Token) -> bool:
    if not tok.is_word():
        return False
    if tok.text in VALUE_TYPES:
        return True
    return tok.text not in NON_TYPE_WORDS and PASCAL_CASE.match(tok.text) is not None


def _member_access(tokens: Sequence[Token], i: int) -> bool:
    return i > 0 and tokens[i - 1].is_op(".", ":")


def typed_declaration_at(tokens: Sequence[Token], i: int, *, lowercase_name: bool = True) -> Declaration | None:
    """Match ``<type> <name> (= | ;)`` starting at ``tokens[i]``."""
    if i + 2 >= len(tokens):
        return None
    type_tok, name_tok, end_tok = tokens[i], tokens[i + 1], tokens[i + 2]
    if not is_type_name(type_tok) or _member_access(tokens, i):
        return None
    if not name_tok.is_word() or name_tok.text in NON_TYPE_WORDS or name_tok.line != type_tok.line:
        return None
    if lowercase_name and not _is_lower_start(name_tok.text):
        return None
    if not end_tok.is_op("=", ";"):
        return None
    return Declaration(start=type_tok, name=name_tok, end=end_tok)


def function_declaration_at(tokens: Sequence[Token], i: int) -> Declaration | None:
    """Match ``<type|void> <lowercase-name> (`` starting at ``tokens[i]``."""
    if i + 2 >= len(tokens):
        return None
    type_tok, name_tok, paren = tokens[i], tokens[i + 1], tokens[i + 2]
    if not (type_tok.is_word("void") or is_type_name(type_tok)) or _member_access(tokens, i):
        return None
    if i > 0 and tokens[i - 1].is_word("new"):
        return None
    if not name_tok.is_word() or name_tok.text in NON_TYPE_WORDS or not name_tok.text[0].islower():
        return None
    if not paren.is_op("(") or name_tok.line != type_tok.line:
        return None
    return Declaration(start=type_tok, name=name_tok, end=paren)


def keyword_declaration_at(tokens: Sequence[Token], i: int, keyword: str) -> Declaration | None:
    """Match ``<keyword> <name>`` such as ``unit Sales`` or ``enum STATUS``."""
    if i + 1 >= len(tokens):
        return None
    kw, name_tok = tokens[i], tokens[i + 1]
    if not kw.is_word(keyword) or not name_tok.is_word() or _member_access(tokens, i):
        return None
    return Declaration(start=kw, name=name_tok, end=name_tok)


def object_declaration_in(line_tokens: Sequence[Token]) -> tuple[Declaration, bool] | None:
    """Find the object declaration on one line, preferring a persistent one.

    Returns the declaration and whether it is persistent. Leading annotations
    (``@Audit persistent object Foo``) are allowed and ignored.
    """
    plain: Declaration | None = None
    for i, tok in enumerate(line_tokens):
        if not tok.is_word("object") or i + 1 >= len(line_tokens):
            continue
        name_tok = line_tokens[i + 1]
        if not name_tok.is_word() or PASCAL_CASE.match(name_tok.text) is None:
            continue
        if i > 0 and line_tokens[i - 1].is_word("persistent"):
            return Declaration(start=line_tokens[i - 1], name=name_tok, end=name_tok), True
        if plain is None:
            plain = Declaration(start=tok, name=name_tok, end=name_tok)
    if plain is None:
        return None
    return plain, False
