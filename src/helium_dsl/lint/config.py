"""Lint rule configuration: the generated rules artifact and its built-in fallback."""

from __future__ import annotations

import functools
import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from helium_dsl.config import load_settings
from helium_dsl.models import DiagnosticSeverity

logger = logging.getLogger(__name__)

NO_VAR_IN_ELSE = "no-var-in-else"
DOT_NOTATION_LIMIT = "dot-notation-limit"
NAMING_CONVENTIONS = "naming-conventions"
FORBIDDEN_OPERATORS = "forbidden-operators"


class Rule(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    severity: str
    message: str
    category: str
    enabled: bool = True

    @property
    def diagnostic_severity(self) -> DiagnosticSeverity:
        if self.severity == "warning":
            return DiagnosticSeverity.WARNING
        if self.severity == "info":
            return DiagnosticSeverity.INFORMATION
        return DiagnosticSeverity.ERROR


class _RuleEntry(BaseModel):
    id: str | None = None
    severity: str = "error"
    message: str = ""
    category: str = "general"
    enabled: bool = True


_ARTIFACT_ADAPTER = TypeAdapter(dict[str, _RuleEntry])

_DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(
        id=NO_VAR_IN_ELSE,
        severity="error",
        message="Variables cannot be declared in else blocks. Declare before if statement.",
        category="variables",
    ),
    Rule(
        id=DOT_NOTATION_LIMIT,
        severity="warning",
        message="Dot notation can only be used once per statement",
        category="style",
    ),
    Rule(
        id=NAMING_CONVENTIONS,
        severity="warning",
        message="Identifiers must follow Helium DSL naming conventions.",
        category="style",
    ),
    Rule(
        id=FORBIDDEN_OPERATORS,
        severity="warning",
        message="Forbidden operator usage.",
        category="style",
    ),
)


class RuleSet:
    """Immutable id -> Rule mapping; a missing or disabled rule does not run."""

    def __init__(self, rules: Mapping[str, Rule], source: Path | None = None) -> None:
        self._rules = MappingProxyType(dict(rules))
        self.source = source

    @classmethod
    def defaults(cls) -> RuleSet:
        return cls({rule.id: rule for rule in _DEFAULT_RULES})

    def get(self, rule_id: str) -> Rule | None:
        return self._rules.get(rule_id)

    def is_enabled(self, rule_id: str) -> bool:
        rule = self._rules.get(rule_id)
        return rule is not None and rule.enabled

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)


def parse_rules_document(data: Any) -> dict[str, Rule]:
    """Validate a rules artifact, either ``{"rules": {...}}`` or a bare id mapping."""
    if isinstance(data, dict) and isinstance(data.get("rules"), dict):
        data = data["rules"]
    entries = _ARTIFACT_ADAPTER.validate_python(data)
    return {
        key: Rule(
            id=entry.id or key,
            severity=entry.severity,
            message=entry.message,
            category=entry.category,
            enabled=entry.enabled,
        )
        for key, entry in entries.items()
    }


def load_rules(path: Path | None = None) -> RuleSet:
    rules_path = path if path is not None else load_settings().rules_path
    try:
        raw = rules_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No rule configuration at %s; using built-in rules", rules_path)
        return RuleSet.defaults()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read rule configuration %s (%s); using built-in rules", rules_path, exc)
        return RuleSet.defaults()

    try:
        rules = parse_rules_document(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Malformed rule configuration %s; using built-in rules: %s", rules_path, exc)
        return RuleSet.defaults()

    if not rules:
        return RuleSet.defaults()
    logger.info("Loaded %d lint rules from %s", len(rules), rules_path)
    return RuleSet(rules, source=rules_path)


@functools.cache
def active_rules() -> RuleSet:
    """Rule set for the process lifetime, loaded on first use."""
    return load_rules()
