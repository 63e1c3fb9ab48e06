"""Language-service session tying the checkers and the workspace index together."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from helium_dsl.config import Settings, load_settings
from helium_dsl.core.completion import BifCompletion, assemble_completions, load_bif_completions
from helium_dsl.core.ports.parser import DslParser
from helium_dsl.core.scanner import split_lines
from helium_dsl.core.symbols import build_symbol_table
from helium_dsl.core.syntax import check_syntax
from helium_dsl.core.workspace import ScanOutcome, WorkspaceIndex
from helium_dsl.lint.config import RuleSet, load_rules
from helium_dsl.lint.engine import run_lints
from helium_dsl.models import CompletionItem, Diagnostic, Location, Position

logger = logging.getLogger(__name__)

_WORD_BEFORE = re.compile(r"[A-Za-z0-9_]*$")
_WORD_AFTER = re.compile(r"[A-Za-z0-9_]*")
_TYPE_NAME = re.compile(r"[A-Z][A-Za-z0-9_]*\Z")


def type_name_at(text: str, position: Position) -> str | None:
    """The PascalCase identifier touching ``position``, if there is one."""
    lines = split_lines(text)
    if not 0 <= position.line < len(lines):
        return None
    line = lines[position.line]
    before = _WORD_BEFORE.search(line[: position.character])
    after = _WORD_AFTER.match(line, position.character)
    word = (before.group() if before else "") + (after.group() if after else "")
    return word if _TYPE_NAME.match(word) else None


class HeliumLanguageService:
    """One editor session: validation, completion and navigation.

    The session exclusively owns its ``WorkspaceIndex``; nothing else mutates it.
    """

    def __init__(
        self,
        *,
        parser: DslParser | None = None,
        rules: RuleSet | None = None,
        bifs: Sequence[BifCompletion] = (),
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.parser = parser
        self.rules = rules if rules is not None else RuleSet.defaults()
        self.bifs = list(bifs)
        self.index = WorkspaceIndex(self.settings.file_extension, self.settings.model_dir)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> HeliumLanguageService:
        """Build a session from the generated artifacts named by ``settings``."""
        from helium_dsl.parser.antlr_adapter import load_parser

        settings = settings or load_settings()
        return cls(
            parser=load_parser(settings.parser_dir),
            rules=load_rules(settings.rules_path),
            bifs=load_bif_completions(settings.bif_metadata_path),
            settings=settings,
        )

    def initialize(self, roots: Iterable[str | Path]) -> list[ScanOutcome]:
        return self.index.initialize(roots)

    def validate(self, uri: str, text: str) -> list[Diagnostic]:
        syntax = check_syntax(text, self.parser)
        diagnostics = [*syntax.diagnostics, *run_lints(text, self.rules)]
        logger.debug("Validated %s: %d diagnostic(s)", uri, len(diagnostics))
        return diagnostics

    def document_changed(self, uri: str, text: str) -> list[Diagnostic]:
        """Handle an open or change notification."""
        diagnostics = self.validate(uri, text)
        self.index.update_file(uri)
        return diagnostics

    def file_deleted(self, uri: str) -> list[str]:
        return self.index.remove_file(uri)

    def complete(self, text: str) -> list[CompletionItem]:
        return assemble_completions(build_symbol_table(text), self.bifs)

    def resolve_definition(self, uri: str, text: str, position: Position) -> Location | None:
        name = type_name_at(text, position)
        if name is None:
            logger.debug("No type name at %s:%d:%d", uri, position.line, position.character)
            return None
        if not self.index.is_user_defined_type(name):
            logger.debug("%r is not a user-defined type", name)
            return None
        return self.index.location_of(name)

    # Types are objects, so a type definition is the object definition itself.
    resolve_type_definition = resolve_definition
