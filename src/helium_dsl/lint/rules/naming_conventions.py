from __future__ import annotations

import re
from collections.abc import Sequence

from helium_dsl.core.declarations import Declaration, keyword_declaration_at, typed_declaration_at
from helium_dsl.core.scanner import Token
from helium_dsl.lint.config import NAMING_CONVENTIONS
from helium_dsl.lint.engine import LintContext

CAMEL = re.compile(r"[a-z][A-Za-z0-9_]*\Z")
PASCAL = re.compile(r"[A-Z][A-Za-z0-9_]*\Z")
UPPER = re.compile(r"[A-Z0-9_]+\Z")
SNAKE = re.compile(r"[a-z0-9_]+\Z")


def object_body_mask(tokens: Sequence[Token]) -> list[bool]:
    """For each token, whether it sits directly inside an ``object { ... }`` body."""
    mask: list[bool] = []
    blocks: list[bool] = []
    header_is_object = False
    for tok in tokens:
        mask.append(bool(blocks) and blocks[-1])
        if tok.is_word("object"):
            header_is_object = True
        elif tok.is_op("{"):
            blocks.append(header_is_object)
            header_is_object = False
        elif tok.is_op("}"):
            if blocks:
                blocks.pop()
            header_is_object = False
        elif tok.is_op(";"):
            header_is_object = False
    return mask


def _classify(tokens: Sequence[Token], i: int, in_object: bool) -> tuple[Declaration, re.Pattern[str], str] | None:
    decl = keyword_declaration_at(tokens, i, "unit")
    if decl is not None:
        return decl, PASCAL, "Units should be PascalCase."
    decl = keyword_declaration_at(tokens, i, "enum")
    if decl is not None:
        return decl, UPPER, "Enums should be UPPERCASE."
    decl = typed_declaration_at(tokens, i, lowercase_name=False)
    if decl is None:
        return None
    if in_object:
        return decl, SNAKE, "Attributes should be snake_case."
    return decl, CAMEL, "Variables should be camelCase."


def apply_naming_conventions(ctx: LintContext) -> None:
    if not ctx.rules.is_enabled(NAMING_CONVENTIONS):
        return

    tokens = ctx.tokens
    in_object = object_body_mask(tokens)
    decided_lines: set[int] = set()
    for i, tok in enumerate(tokens):
        if tok.line in decided_lines:
            continue
        found = _classify(tokens, i, in_object[i])
        if found is None:
            continue
        decl, convention, message = found
        decided_lines.add(tok.line)
        name = decl.name
        if convention.match(name.text) is None:
            ctx.report(NAMING_CONVENTIONS, name.line, name.column, len(name.text), message)
