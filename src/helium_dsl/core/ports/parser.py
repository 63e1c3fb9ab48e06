from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class SyntaxErrorEvent:
    line: int  # 1-based
    column: int  # 0-based
    message: str


@dataclass(frozen=True)
class ParseOutcome:
    tree: Any = None
    errors: list[SyntaxErrorEvent] = field(default_factory=list)
    failure: str | None = None


class DslParser(Protocol):
    def parse(self, text: str) -> ParseOutcome: ...
