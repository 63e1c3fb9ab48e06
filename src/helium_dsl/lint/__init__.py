from helium_dsl.lint.config import Rule, RuleSet, active_rules, load_rules
from helium_dsl.lint.engine import LINT_SOURCE, LintContext, run_lints

__all__ = [
    "LINT_SOURCE",
    "LintContext",
    "Rule",
    "RuleSet",
    "active_rules",
    "load_rules",
    "run_lints",
]
