from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from helium_dsl.config import load_settings
from helium_dsl.core.languages import KEYWORDS
from helium_dsl.models import CompletionItem, CompletionItemKind, SymbolKind, SymbolTable

logger = logging.getLogger(__name__)

SYMBOL_COMPLETION_KINDS: dict[SymbolKind, CompletionItemKind] = {
    SymbolKind.UNIT: CompletionItemKind.MODULE,
    SymbolKind.FUNCTION: CompletionItemKind.FUNCTION,
    SymbolKind.VARIABLE: CompletionItemKind.VARIABLE,
    SymbolKind.OBJECT: CompletionItemKind.CLASS,
    SymbolKind.ENUM: CompletionItemKind.ENUM,
    SymbolKind.ATTRIBUTE: CompletionItemKind.FIELD,
}


class BifEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    signature: str | None = None


class BifCompletion(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    detail: str


_NAMESPACES_ADAPTER = TypeAdapter(dict[str, list[BifEntry]])


def parse_bif_metadata(data: object) -> list[BifCompletion]:
    """Flatten ``{"namespaces": {ns: [...]}}`` (or a bare namespace map) into completions."""
    if isinstance(data, dict) and isinstance(data.get("namespaces"), dict):
        data = data["namespaces"]
    namespaces = _NAMESPACES_ADAPTER.validate_python(data)
    completions: list[BifCompletion] = []
    for namespace, entries in namespaces.items():
        for entry in entries:
            label = f"{namespace}:{entry.name}"
            completions.append(BifCompletion(label=label, detail=entry.signature or label))
    return completions


def load_bif_completions(path: Path | None = None) -> list[BifCompletion]:
    metadata_path = path if path is not None else load_settings().bif_metadata_path
    try:
        raw = metadata_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No built-in function metadata at %s", metadata_path)
        return []
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read built-in function metadata %s: %s", metadata_path, exc)
        return []

    try:
        completions = parse_bif_metadata(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Malformed built-in function metadata %s: %s", metadata_path, exc)
        return []

    logger.debug("Loaded %d built-in function(s) from %s", len(completions), metadata_path)
    return completions


def assemble_completions(
    symbol_table: SymbolTable,
    bifs: Iterable[BifCompletion] = (),
) -> list[CompletionItem]:
    """Keywords, then built-in functions, then names declared in the document."""
    items = [CompletionItem(label=keyword, kind=CompletionItemKind.KEYWORD) for keyword in KEYWORDS]
    items.extend(CompletionItem(label=bif.label, kind=CompletionItemKind.FUNCTION, detail=bif.detail) for bif in bifs)
    items.extend(
        CompletionItem(label=symbol.name, kind=SYMBOL_COMPLETION_KINDS[symbol.kind], detail=symbol.kind.value)
        for symbol in symbol_table.symbols
    )
    return items
