from helium_dsl.lint.rules.dot_notation_limit import apply_dot_notation_limit
from helium_dsl.lint.rules.forbidden_operators import apply_forbidden_operators
from helium_dsl.lint.rules.naming_conventions import apply_naming_conventions
from helium_dsl.lint.rules.no_var_in_else import apply_no_var_in_else

RULES = (
    apply_no_var_in_else,
    apply_dot_notation_limit,
    apply_naming_conventions,
    apply_forbidden_operators,
)

__all__ = [
    "RULES",
    "apply_dot_notation_limit",
    "apply_forbidden_operators",
    "apply_naming_conventions",
    "apply_no_var_in_else",
]
