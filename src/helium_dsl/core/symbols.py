from __future__ import annotations

from collections.abc import Callable, Sequence

from helium_dsl.core.declarations import (
    Declaration,
    function_declaration_at,
    keyword_declaration_at,
    object_declaration_in,
    typed_declaration_at,
)
from helium_dsl.core.scanner import Token, code_tokens, group_by_line, tokenize
from helium_dsl.models import Symbol, SymbolKind, SymbolLocation, SymbolTable

_Matcher = Callable[[Sequence[Token], int], Declaration | None]

_LINE_MATCHERS: tuple[tuple[SymbolKind, _Matcher], ...] = (
    (SymbolKind.ENUM, lambda tokens, i: keyword_declaration_at(tokens, i, "enum")),
    (SymbolKind.FUNCTION, function_declaration_at),
    (SymbolKind.VARIABLE, typed_declaration_at),
)


def _first_match(line_tokens: Sequence[Token], matcher: _Matcher) -> Declaration | None:
    for i in range(len(line_tokens)):
        decl = matcher(line_tokens, i)
        if decl is not None:
            return decl
    return None


def _symbol(decl: Declaration, kind: SymbolKind) -> Symbol:
    return Symbol(
        name=decl.name.text,
        kind=kind,
        location=SymbolLocation(line=decl.start.line, character=decl.start.column),
    )


def _line_symbols(line_tokens: Sequence[Token]) -> list[Symbol]:
    found: list[Symbol] = []

    unit = _first_match(line_tokens, lambda tokens, i: keyword_declaration_at(tokens, i, "unit"))
    if unit is not None:
        found.append(_symbol(unit, SymbolKind.UNIT))

    obj = object_declaration_in(line_tokens)
    if obj is not None:
        found.append(_symbol(obj[0], SymbolKind.OBJECT))

    for kind, matcher in _LINE_MATCHERS:
        decl = _first_match(line_tokens, matcher)
        if decl is not None:
            found.append(_symbol(decl, kind))
    return found


def build_symbol_table(text: str) -> SymbolTable:
    """Collect declared names from one document.

    Each line contributes at most one symbol per kind. Names are neither
    scoped nor de-duplicated.
    """
    symbols: list[Symbol] = []
    for _, line_tokens in sorted(group_by_line(code_tokens(tokenize(text))).items()):
        symbols.extend(_line_symbols(line_tokens))
    return SymbolTable(symbols=symbols)
