from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from helium_dsl.cli.session import collect_sources, console, get_service, print_diagnostics
from helium_dsl.core.languages import path_to_uri
from helium_dsl.lint.config import load_rules
from helium_dsl.models import DiagnosticSeverity


def lint(
    paths: Annotated[list[Path], typer.Argument(help="Helium source files or directories to check.")],
    rules: Annotated[Path | None, typer.Option(help="Rule configuration JSON to use instead of the default.")] = None,
) -> None:
    """Report syntax and lint diagnostics for Helium source files."""
    sources = collect_sources(paths)
    service = get_service(rules)

    total = 0
    errors = 0
    for source in sources:
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            console.print(f"[red]Cannot read[/red] {escape(str(source))}: {escape(str(exc))}", soft_wrap=True)
            errors += 1
            continue
        diagnostics = service.validate(path_to_uri(source), text)
        print_diagnostics(source, diagnostics)
        total += len(diagnostics)
        errors += sum(1 for d in diagnostics if d.severity is DiagnosticSeverity.ERROR)

    console.print(f"[bold]{total}[/bold] diagnostic(s) in {len(sources)} file(s)")
    if errors:
        raise typer.Exit(1)


def rules(
    path: Annotated[Path | None, typer.Option("--path", help="Rule configuration JSON to show.")] = None,
) -> None:
    """Show the active lint rules."""
    rule_set = load_rules(path)
    table = Table(show_lines=False)
    for header in ("id", "severity", "category", "enabled", "message"):
        table.add_column(header, no_wrap=header == "id")
    for rule in rule_set:
        table.add_row(rule.id, rule.severity, rule.category, str(rule.enabled), escape(rule.message))
    console.print(table)
    source = rule_set.source if rule_set.source is not None else "built-in defaults"
    console.print(f"({len(rule_set)} rules from {source})")
