from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from helium_dsl.config import load_settings
from helium_dsl.core.languages import is_dsl_file
from helium_dsl.core.service import HeliumLanguageService
from helium_dsl.models import Diagnostic, DiagnosticSeverity

console = Console()

_SEVERITY_STYLES: dict[DiagnosticSeverity, str] = {
    DiagnosticSeverity.ERROR: "red",
    DiagnosticSeverity.WARNING: "yellow",
    DiagnosticSeverity.INFORMATION: "cyan",
    DiagnosticSeverity.HINT: "dim",
}


def get_service(rules_path: Path | None = None) -> HeliumLanguageService:
    settings = load_settings()
    if rules_path is not None:
        settings = replace(settings, rules_path=rules_path)
    return HeliumLanguageService.from_settings(settings)


def collect_sources(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into the DSL files below them; exit on missing paths."""
    extension = load_settings().file_extension
    sources: list[Path] = []
    for path in paths:
        if not path.exists():
            console.print(f"[red]Path not found:[/red] {path}")
            raise typer.Exit(1)
        if path.is_dir():
            sources.extend(sorted(p for p in path.rglob(f"*{extension}") if is_dsl_file(p, extension)))
        else:
            sources.append(path)
    return sources


def print_diagnostics(path: Path, diagnostics: list[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        start = diagnostic.range.start
        style = _SEVERITY_STYLES[diagnostic.severity]
        code = f" [dim]({diagnostic.code})[/dim]" if diagnostic.code else ""
        console.print(
            f"{escape(str(path))}:{start.line + 1}:{start.character + 1}: "
            f"[{style}]{diagnostic.severity.name.lower()}[/{style}] {escape(diagnostic.message)}{code}",
            highlight=False,
            soft_wrap=True,
        )
