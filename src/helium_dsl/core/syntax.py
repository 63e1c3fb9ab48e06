"""Turn parser errors into diagnostics, dropping known false positives.

The generated grammar is stricter than the Helium compiler in a handful of
places (built-in method calls, namespaced unit calls, comparisons inside
conditions). Those error shapes are listed in ``SUPPRESSION_PATTERNS`` and are
never surfaced to the user.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from helium_dsl.core.ports.parser import DslParser, SyntaxErrorEvent
from helium_dsl.core.scanner import split_lines
from helium_dsl.models import Diagnostic, DiagnosticSeverity, Range

logger = logging.getLogger(__name__)

PARSER_SOURCE = "helium-dsl-parser"
PARSER_MISSING_MESSAGE = "Parser not generated yet. Run the grammar build to generate MezDSLLexer/MezDSLParser."

BUILTIN_METHODS = (
    "jsonPut",
    "jsonGet",
    "jsonRemove",
    "jsonContains",
    "jsonKeys",
    "length",
    "concat",
    "translateMessageGoogle",
    "getLanguageChatGpt",
    "startsWith",
    "replaceAll",
    "substring",
)

_BUILTIN_CALL = re.compile(r"\.(?:" + "|".join(BUILTIN_METHODS) + r")\s*\(")
_UNIT_CALL = re.compile(r"[A-Z][A-Za-z0-9_]*:\s*[A-Za-z0-9_]+\s*\(")
_OPEN_PAREN = re.compile(r"\([^)]*$")
_NESTED_OPEN_PAREN = re.compile(r"\([^)]*\([^)]*$")
_CLOSES_ARGUMENT = re.compile(r"^\s*[,;)]")
_RETURN_AHEAD = re.compile(r"^\s*return\s")
_COMPARISON_AHEAD = re.compile(r"^\s*==\s*(?:true|false|null|[\"'\d\w])")
_COMPARABLE_BEHIND = re.compile(r"[A-Za-z0-9_\]\.)\"']\s*$")
_TERMINATOR_AHEAD = re.compile(r"^\s*;")
_STATEMENT_END_BEHIND = re.compile(r"[A-Za-z0-9_\])]\s*$")

_RECURSION_MARKERS = ("maximum recursion depth exceeded", "Maximum call stack size exceeded")


@dataclass(frozen=True)
class ErrorContext:
    """Text around a reported error on its own line."""

    message: str
    before: str
    after: str

    @classmethod
    def of(cls, event: SyntaxErrorEvent, lines: Sequence[str]) -> ErrorContext:
        index = event.line - 1
        line = lines[index] if 0 <= index < len(lines) else ""
        column = min(max(event.column, 0), len(line))
        return cls(message=event.message, before=line[:column], after=line[column:])

    def calls_builtin_or_unit(self) -> bool:
        return bool(_BUILTIN_CALL.search(self.before) or _UNIT_CALL.search(self.before))


@dataclass(frozen=True)
class SuppressionPattern:
    name: str
    fragments: tuple[str, ...]
    applies: Callable[[ErrorContext], bool] = lambda ctx: True

    def matches(self, ctx: ErrorContext) -> bool:
        return any(fragment in ctx.message for fragment in self.fragments) and self.applies(ctx)


SUPPRESSION_PATTERNS: tuple[SuppressionPattern, ...] = (
    SuppressionPattern("recursion-limit", _RECURSION_MARKERS),
    SuppressionPattern(
        "call-argument-close",
        (
            "mismatched input ')' expecting {',', '==', '!=', '<', '<=', '>', '>=', "
            "'||', '&&', '+', '-', '*', '/', '%'}",
        ),
        lambda ctx: ctx.calls_builtin_or_unit() or bool(_CLOSES_ARGUMENT.match(ctx.after)),
    ),
    SuppressionPattern(
        "call-argument-separator",
        ("mismatched input ')' expecting ','",),
        lambda ctx: bool(_OPEN_PAREN.search(ctx.before)) or ctx.calls_builtin_or_unit(),
    ),
    SuppressionPattern(
        "nested-call-close",
        ("extraneous input ')' expecting ','", "extraneous input ')' expecting ';'"),
        lambda ctx: bool(_NESTED_OPEN_PAREN.search(ctx.before)) or ctx.calls_builtin_or_unit(),
    ),
    SuppressionPattern(
        "statement-return",
        ("extraneous input 'return'",),
        lambda ctx: not _OPEN_PAREN.search(ctx.before) and bool(_RETURN_AHEAD.match(ctx.after)),
    ),
    SuppressionPattern(
        "comparison",
        ("mismatched input '==' expecting",),
        lambda ctx: bool(_COMPARISON_AHEAD.match(ctx.after) or _COMPARABLE_BEHIND.search(ctx.before)),
    ),
    SuppressionPattern(
        "statement-terminator",
        ("mismatched input ';' expecting",),
        lambda ctx: bool(_TERMINATOR_AHEAD.match(ctx.after))
        and bool(_STATEMENT_END_BEHIND.search(ctx.before) or _BUILTIN_CALL.search(ctx.before)),
    ),
)


def suppression_for(event: SyntaxErrorEvent, lines: Sequence[str]) -> str | None:
    """Name of the pattern that marks ``event`` as a false positive, if any."""
    ctx = ErrorContext.of(event, lines)
    for pattern in SUPPRESSION_PATTERNS:
        if pattern.matches(ctx):
            return pattern.name
    return None


def is_recursion_failure(message: str) -> bool:
    return any(marker in message for marker in _RECURSION_MARKERS)


@dataclass(frozen=True)
class SuppressedError:
    event: SyntaxErrorEvent
    pattern: str


@dataclass
class SyntaxCheckResult:
    diagnostics: list[Diagnostic] = field(default_factory=list)
    suppressed: list[SuppressedError] = field(default_factory=list)
    parser_available: bool = True


def _warning(message: str, range_: Range) -> Diagnostic:
    return Diagnostic(message=message, severity=DiagnosticSeverity.WARNING, range=range_, source=PARSER_SOURCE)


def check_syntax(text: str, parser: DslParser | None) -> SyntaxCheckResult:
    if parser is None:
        placeholder = Diagnostic(
            message=PARSER_MISSING_MESSAGE,
            severity=DiagnosticSeverity.INFORMATION,
            range=Range.on_line(0, 0),
            source=PARSER_SOURCE,
        )
        return SyntaxCheckResult(diagnostics=[placeholder], parser_available=False)

    outcome = parser.parse(text)
    lines = split_lines(text)
    result = SyntaxCheckResult()

    for event in outcome.errors:
        pattern = suppression_for(event, lines)
        if pattern is not None:
            result.suppressed.append(SuppressedError(event=event, pattern=pattern))
            continue
        line = max(event.line - 1, 0)
        column = max(event.column, 0)
        result.diagnostics.append(_warning(event.message, Range.on_line(line, column)))

    if outcome.failure is not None:
        if is_recursion_failure(outcome.failure):
            event = SyntaxErrorEvent(line=1, column=0, message=outcome.failure)
            result.suppressed.append(SuppressedError(event=event, pattern="recursion-limit"))
        else:
            result.diagnostics.append(_warning(f"Parse failed: {outcome.failure}", Range.on_line(0, 0, 0)))

    if result.suppressed:
        logger.debug("Suppressed %d parser false positive(s)", len(result.suppressed))
    return result
