"""Workspace index of object definitions found in model files.

The index is owned by a language-service session. It maps an object name to
the single definition navigation should jump to, preferring persistent
objects over plain ones.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from helium_dsl.config import DEFAULT_FILE_EXTENSION, DEFAULT_MODEL_DIR
from helium_dsl.core.declarations import object_declaration_in
from helium_dsl.core.languages import is_model_file, is_primitive_type, path_to_uri, uri_to_path
from helium_dsl.core.scanner import code_tokens, group_by_line, tokenize
from helium_dsl.models import Location, ObjectDefinition, Range

logger = logging.getLogger(__name__)


class ScanStatus(str, Enum):
    INDEXED = "indexed"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class ScanOutcome:
    path: Path
    status: ScanStatus
    reason: str | None = None
    definitions: tuple[ObjectDefinition, ...] = ()


@dataclass(frozen=True)
class IndexStats:
    object_count: int
    objects: list[str] = field(default_factory=list)
    roots: list[Path] = field(default_factory=list)


def extract_object_definitions(text: str, uri: str) -> list[ObjectDefinition]:
    """Object declarations in ``text``, at most one per line."""
    found: list[ObjectDefinition] = []
    for _, line_tokens in sorted(group_by_line(code_tokens(tokenize(text))).items()):
        match = object_declaration_in(line_tokens)
        if match is None:
            continue
        decl, is_persistent = match
        found.append(
            ObjectDefinition(
                name=decl.name.text,
                uri=uri,
                line=decl.name.line,
                character=decl.name.column,
                is_persistent=is_persistent,
            )
        )
    return found


class WorkspaceIndex:
    def __init__(
        self,
        file_extension: str = DEFAULT_FILE_EXTENSION,
        model_dir: str = DEFAULT_MODEL_DIR,
    ) -> None:
        self._file_extension = file_extension
        self._model_dir = model_dir
        self._definitions: dict[str, ObjectDefinition] = {}
        self._roots: list[Path] = []

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    # -- mutation ---------------------------------------------------------

    def initialize(self, roots: Iterable[str | Path]) -> list[ScanOutcome]:
        """Forget everything and scan every model file under ``roots``."""
        self._roots = [uri_to_path(str(root)) for root in roots]
        self._definitions.clear()
        if not self._roots:
            logger.warning("No workspace roots given; the object index is empty")

        outcomes: list[ScanOutcome] = []
        for root in self._roots:
            logger.info("Scanning workspace root %s", root)
            outcomes.extend(self._scan_directory(root))

        logger.info("Indexed %d object definition(s) from %d root(s)", len(self._definitions), len(self._roots))
        return outcomes

    def update_file(self, uri: str) -> ScanOutcome:
        """Re-index one file after it was opened or changed."""
        path = uri_to_path(uri)
        if not is_model_file(path, self._file_extension, self._model_dir):
            logger.debug("Not a model file, index unchanged: %s", path)
            return ScanOutcome(path=path, status=ScanStatus.SKIPPED, reason="not a model file")

        removed = self._drop_uri(path_to_uri(path))
        if removed:
            logger.debug("Dropped %d stale definition(s) from %s: %s", len(removed), path, removed)
        return self._scan_file(path)

    def remove_file(self, uri: str) -> list[str]:
        """Drop every definition that came from a deleted file."""
        path = uri_to_path(uri)
        removed = self._drop_uri(path_to_uri(path))
        if removed:
            logger.info("Removed %d definition(s) of deleted file %s", len(removed), path)
        return removed

    # -- queries ------------------------------------------------------------

    def lookup(self, name: str) -> ObjectDefinition | None:
        return self._definitions.get(name)

    def location_of(self, name: str) -> Location | None:
        definition = self._definitions.get(name)
        if definition is None:
            return None
        return Location(
            uri=definition.uri,
            range=Range.on_line(definition.line, definition.character, len(definition.name)),
        )

    def is_user_defined_type(self, name: str) -> bool:
        return not is_primitive_type(name) and name in self._definitions

    def definitions(self) -> Iterator[ObjectDefinition]:
        return iter(self._definitions.values())

    def stats(self) -> IndexStats:
        return IndexStats(
            object_count=len(self._definitions),
            objects=sorted(self._definitions),
            roots=list(self._roots),
        )

    # -- internals ----------------------------------------------------------

    def _drop_uri(self, uri: str) -> list[str]:
        removed = [name for name, definition in self._definitions.items() if definition.uri == uri]
        for name in removed:
            del self._definitions[name]
        return removed

    def _store(self, definition: ObjectDefinition) -> bool:
        existing = self._definitions.get(definition.name)
        if existing is None or (definition.is_persistent and not existing.is_persistent):
            self._definitions[definition.name] = definition
            return True
        return False

    def _scan_directory(self, directory: Path) -> list[ScanOutcome]:
        try:
            entries = sorted(directory.iterdir(), key=lambda entry: entry.name)
        except FileNotFoundError:
            logger.debug("Workspace directory does not exist: %s", directory)
            return [ScanOutcome(path=directory, status=ScanStatus.SKIPPED, reason="missing directory")]
        except OSError as exc:
            logger.warning("Cannot list %s: %s", directory, exc)
            return [ScanOutcome(path=directory, status=ScanStatus.ERROR, reason=str(exc))]

        outcomes: list[ScanOutcome] = []
        for entry in entries:
            if entry.is_dir():
                if not entry.name.startswith("."):
                    outcomes.extend(self._scan_directory(entry))
            elif entry.is_file() and is_model_file(entry, self._file_extension, self._model_dir):
                outcomes.append(self._scan_file(entry))
        return outcomes

    def _scan_file(self, path: Path) -> ScanOutcome:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Model file vanished before it could be read: %s", path)
            return ScanOutcome(path=path, status=ScanStatus.SKIPPED, reason="missing file")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot read model file %s: %s", path, exc)
            return ScanOutcome(path=path, status=ScanStatus.ERROR, reason=str(exc))

        definitions = extract_object_definitions(text, path_to_uri(path))
        stored = tuple(definition for definition in definitions if self._store(definition))
        if definitions:
            logger.debug("Found %d object(s) in %s", len(definitions), path)
        else:
            logger.debug("Scanned model file without objects: %s", path)
        return ScanOutcome(path=path, status=ScanStatus.INDEXED, definitions=stored)
