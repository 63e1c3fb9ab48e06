"""Helium does not allow variable declarations inside a plain ``else`` block."""

from __future__ import annotations

from helium_dsl.core.declarations import Declaration, typed_declaration_at
from helium_dsl.core.scanner import Token
from helium_dsl.lint.config import NO_VAR_IN_ELSE
from helium_dsl.lint.engine import LintContext


def _span(decl: Declaration) -> int:
    if decl.end.line == decl.start.line:
        return decl.end.end_column - decl.start.column
    return decl.name.end_column - decl.start.column


def apply_no_var_in_else(ctx: LintContext) -> None:
    if not ctx.rules.is_enabled(NO_VAR_IN_ELSE):
        return

    tokens = ctx.tokens
    in_else_block = False
    single_statement = False
    brace_depth = 0
    statement_head: Token | None = None

    for i, tok in enumerate(tokens):
        if tok.is_word("else"):
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            if nxt is not None and nxt.is_word("if"):
                # a new conditional arm, not an else block
                in_else_block = False
                single_statement = False
            elif not in_else_block:
                in_else_block = True
                single_statement = nxt is None or not nxt.is_op("{")
                brace_depth = 0
            statement_head = None
            continue

        if in_else_block:
            if tok.is_op("{"):
                brace_depth += 1
            elif tok.is_op("}"):
                brace_depth -= 1
                if brace_depth <= 0:
                    in_else_block = False
            elif tok.is_op(";"):
                if single_statement and brace_depth <= 0:
                    in_else_block = False
            else:
                decl = typed_declaration_at(tokens, i)
                if decl is not None and not (statement_head is not None and statement_head.is_word("return")):
                    ctx.report(NO_VAR_IN_ELSE, decl.start.line, decl.start.column, _span(decl))

        if tok.is_op("{", "}", ";"):
            statement_head = None
        elif statement_head is None:
            statement_head = tok
