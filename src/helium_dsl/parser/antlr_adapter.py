"""Adapter around the generated ANTLR ``MezDSL`` lexer and parser.

The grammar is compiled into Python modules by the grammar build. This module
never ships them; it looks them up at runtime and reports ``None`` when they
have not been generated yet.
"""

from __future__ import annotations

import importlib.util
import logging
from pathlib import Path
from typing import Any

from antlr4 import CommonTokenStream, InputStream
from antlr4.error.ErrorListener import ErrorListener

from helium_dsl.config import load_settings
from helium_dsl.core.ports.parser import ParseOutcome, SyntaxErrorEvent

logger = logging.getLogger(__name__)

LEXER_NAME = "MezDSLLexer"
PARSER_NAME = "MezDSLParser"
START_RULE = "script"
RECURSION_FAILURE = "maximum recursion depth exceeded while parsing"


class CollectingErrorListener(ErrorListener):
    """Records every syntax error instead of printing it to stderr."""

    def __init__(self) -> None:
        super().__init__()
        self.errors: list[SyntaxErrorEvent] = []

    def syntaxError(  # noqa: N802
        self, recognizer: Any, offendingSymbol: Any, line: int, column: int, msg: str, e: Any  # noqa: N803
    ) -> None:
        self.errors.append(SyntaxErrorEvent(line=line, column=column, message=msg))


class AntlrDslParser:
    """Implements the ``DslParser`` port with generated ANTLR classes."""

    def __init__(self, lexer_cls: type, parser_cls: type, start_rule: str = START_RULE) -> None:
        self._lexer_cls = lexer_cls
        self._parser_cls = parser_cls
        self._start_rule = start_rule

    def parse(self, text: str) -> ParseOutcome:
        listener = CollectingErrorListener()

        lexer = self._lexer_cls(InputStream(text))
        lexer.removeErrorListeners()
        lexer.addErrorListener(listener)

        parser = self._parser_cls(CommonTokenStream(lexer))
        parser.removeErrorListeners()
        parser.addErrorListener(listener)

        tree = None
        failure: str | None = None
        try:
            tree = getattr(parser, self._start_rule)()
        except RecursionError:
            failure = RECURSION_FAILURE
        except Exception as exc:  # generated code may raise anything on unrecoverable input
            failure = str(exc) or type(exc).__name__
            logger.debug("Parser aborted: %s", failure)

        return ParseOutcome(tree=tree, errors=listener.errors, failure=failure)


def _candidate_dirs(parser_dir: Path) -> list[Path]:
    return [parser_dir, parser_dir / "generated" / "grammar"]


def _load_generated_class(parser_dir: Path, name: str) -> type | None:
    for directory in _candidate_dirs(parser_dir):
        module_path = directory / f"{name}.py"
        if not module_path.is_file():
            continue
        spec = importlib.util.spec_from_file_location(name, module_path)
        if spec is None or spec.loader is None:
            continue
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception:
            logger.warning("Failed to import generated %s from %s", name, module_path, exc_info=True)
            return None
        generated = getattr(module, name, None)
        return generated if isinstance(generated, type) else None
    return None


def load_parser(parser_dir: Path | None = None) -> AntlrDslParser | None:
    """Return a parser backed by the generated modules, or None if they are missing."""
    directory = parser_dir if parser_dir is not None else load_settings().parser_dir
    lexer_cls = _load_generated_class(directory, LEXER_NAME)
    parser_cls = _load_generated_class(directory, PARSER_NAME)
    if lexer_cls is None or parser_cls is None:
        logger.info("Generated MezDSL parser not found under %s", directory)
        return None
    return AntlrDslParser(lexer_cls, parser_cls)
