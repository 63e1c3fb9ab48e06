from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    character: int


class Range(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    @classmethod
    def on_line(cls, line: int, character: int, length: int = 1) -> "Range":
        return cls(
            start=Position(line=line, character=character),
            end=Position(line=line, character=character + length),
        )


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    uri: str
    range: Range


class DiagnosticSeverity(IntEnum):
    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    severity: DiagnosticSeverity
    range: Range
    source: str
    code: str | None = None


class SymbolKind(str, Enum):
    UNIT = "unit"
    FUNCTION = "function"
    VARIABLE = "variable"
    OBJECT = "object"
    ENUM = "enum"
    ATTRIBUTE = "attribute"


class SymbolLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    character: int


class Symbol(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: SymbolKind
    location: SymbolLocation | None = None


class SymbolTable(BaseModel):
    symbols: list[Symbol] = []


class ObjectDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    uri: str
    line: int
    character: int
    is_persistent: bool


class CompletionItemKind(IntEnum):
    FUNCTION = 3
    FIELD = 5
    VARIABLE = 6
    CLASS = 7
    MODULE = 9
    ENUM = 13
    KEYWORD = 14


class CompletionItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    kind: CompletionItemKind
    detail: str | None = None
