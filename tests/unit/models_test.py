"""Unit tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from helium_dsl.models import (
    CompletionItem,
    CompletionItemKind,
    Diagnostic,
    DiagnosticSeverity,
    ObjectDefinition,
    Position,
    Range,
    Symbol,
    SymbolKind,
    SymbolTable,
)


class TestPositionModel:
    def test_requires_line_and_character(self) -> None:
        with pytest.raises(ValidationError):
            Position(line=0)  # type: ignore[call-arg]

    def test_is_frozen(self) -> None:
        pos = Position(line=1, character=2)
        with pytest.raises(ValidationError):
            pos.line = 3  # type: ignore[misc]

    def test_serializes_with_lsp_field_names(self) -> None:
        assert Position(line=10, character=20).model_dump() == {"line": 10, "character": 20}


class TestRangeModel:
    def test_on_line_spans_length(self) -> None:
        rng = Range.on_line(4, 7, 3)
        assert rng.start == Position(line=4, character=7)
        assert rng.end == Position(line=4, character=10)

    def test_on_line_defaults_to_one_character(self) -> None:
        rng = Range.on_line(0, 0)
        assert rng.end.character == 1

    def test_equal_ranges_compare_equal(self) -> None:
        assert Range.on_line(2, 5, 4) == Range.on_line(2, 5, 4)


class TestDiagnosticModel:
    def test_code_is_optional(self) -> None:
        diag = Diagnostic(
            message="boom",
            severity=DiagnosticSeverity.WARNING,
            range=Range.on_line(0, 0),
            source="helium-dsl-parser",
        )
        assert diag.code is None

    def test_severity_dumps_as_lsp_number(self) -> None:
        diag = Diagnostic(
            message="boom",
            severity=DiagnosticSeverity.ERROR,
            range=Range.on_line(0, 0),
            source="helium-dsl-lint",
            code="no-var-in-else",
        )
        assert diag.model_dump(mode="json")["severity"] == 1

    def test_rejects_unknown_severity(self) -> None:
        with pytest.raises(ValidationError):
            Diagnostic(message="boom", severity=9, range=Range.on_line(0, 0), source="x")  # type: ignore[arg-type]


class TestSymbolModels:
    def test_symbol_location_is_optional(self) -> None:
        symbol = Symbol(name="Sales", kind=SymbolKind.UNIT)
        assert symbol.location is None

    def test_kind_accepts_string_value(self) -> None:
        symbol = Symbol.model_validate({"name": "total", "kind": "variable"})
        assert symbol.kind is SymbolKind.VARIABLE

    def test_tables_do_not_share_default_list(self) -> None:
        first = SymbolTable()
        first.symbols.append(Symbol(name="A", kind=SymbolKind.OBJECT))
        assert SymbolTable().symbols == []


class TestObjectDefinitionModel:
    def test_round_trips_from_dict(self) -> None:
        data = {"name": "Customer", "uri": "file:///m.mez", "line": 0, "character": 7, "is_persistent": True}
        assert ObjectDefinition.model_validate(data).model_dump() == data


class TestCompletionItemModel:
    def test_keyword_kind_number(self) -> None:
        item = CompletionItem(label="unit", kind=CompletionItemKind.KEYWORD)
        assert item.model_dump(mode="json") == {"label": "unit", "kind": 14, "detail": None}
