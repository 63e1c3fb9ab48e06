from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import cached_property

from helium_dsl.core.scanner import Token, code_tokens, split_lines, tokenize
from helium_dsl.lint.config import RuleSet, active_rules
from helium_dsl.models import Diagnostic, Range

LINT_SOURCE = "helium-dsl-linter"


@dataclass
class LintContext:
    text: str
    rules: RuleSet
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @cached_property
    def lines(self) -> list[str]:
        return split_lines(self.text)

    @cached_property
    def all_tokens(self) -> list[Token]:
        return tokenize(self.text)

    @cached_property
    def tokens(self) -> list[Token]:
        """Code tokens (comments removed) for the whole document."""
        return code_tokens(self.all_tokens)

    def report(self, rule_id: str, line: int, character: int, length: int, message: str | None = None) -> None:
        rule = self.rules.get(rule_id)
        if rule is None:
            return
        self.diagnostics.append(
            Diagnostic(
                message=message or rule.message or rule_id,
                severity=rule.diagnostic_severity,
                source=LINT_SOURCE,
                range=Range.on_line(line, character, length),
                code=rule_id,
            )
        )


LintRule = Callable[[LintContext], None]


def registered_rules() -> tuple[LintRule, ...]:
    from helium_dsl.lint.rules import RULES

    return RULES


def run_lints(text: str, rules: RuleSet | None = None) -> list[Diagnostic]:
    ctx = LintContext(text=text, rules=rules if rules is not None else active_rules())
    for apply_rule in registered_rules():
        apply_rule(ctx)
    return ctx.diagnostics
