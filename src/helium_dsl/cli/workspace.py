import asyncio
from collections import Counter
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from helium_dsl.cli.session import console, get_service, print_diagnostics
from helium_dsl.core.languages import path_to_uri, uri_to_path
from helium_dsl.core.service import HeliumLanguageService
from helium_dsl.core.workspace import ScanStatus
from helium_dsl.models import Position
from helium_dsl.watcher.watchfiles_adapter import WatchfilesWatcher


def _index_roots(service: HeliumLanguageService, roots: list[Path]) -> None:
    outcomes = service.initialize(roots)
    counts = Counter(outcome.status for outcome in outcomes)
    for outcome in outcomes:
        if outcome.status is ScanStatus.ERROR:
            console.print(f"[red]error[/red] {escape(str(outcome.path))}: {escape(outcome.reason or '')}")
    console.print(
        f"Scanned {counts[ScanStatus.INDEXED]} model file(s), "
        f"{counts[ScanStatus.SKIPPED]} skipped, {counts[ScanStatus.ERROR]} error(s)"
    )


def index(
    roots: Annotated[list[Path], typer.Argument(help="Workspace roots to scan for model files.")],
) -> None:
    """Index object definitions under the model directories of the given roots."""
    service = get_service()
    _index_roots(service, roots)

    table = Table(show_lines=False)
    for header in ("name", "persistent", "location"):
        table.add_column(header, no_wrap=header == "name")
    for definition in sorted(service.index.definitions(), key=lambda d: d.name):
        location = f"{uri_to_path(definition.uri)}:{definition.line + 1}:{definition.character + 1}"
        table.add_row(definition.name, "yes" if definition.is_persistent else "no", escape(location))
    console.print(table)
    console.print(f"({len(service.index)} objects)")


def definition(
    file: Annotated[Path, typer.Argument(help="Helium source file containing the reference.")],
    line: Annotated[int, typer.Argument(help="1-based line of the reference.", min=1)],
    character: Annotated[int, typer.Argument(help="1-based column of the reference.", min=1)],
    root: Annotated[
        list[Path] | None, typer.Option("--root", help="Workspace root to index (repeatable). Defaults to cwd.")
    ] = None,
) -> None:
    """Print where the object type under the cursor is defined."""
    if not file.is_file():
        console.print(f"[red]File not found:[/red] {file}")
        raise typer.Exit(1)

    service = get_service()
    service.initialize(root or [Path.cwd()])
    text = file.read_text(encoding="utf-8")
    position = Position(line=line - 1, character=character - 1)
    location = service.resolve_definition(path_to_uri(file), text, position)
    if location is None:
        console.print("[yellow]No definition found[/yellow]")
        raise typer.Exit(1)

    start = location.range.start
    target = uri_to_path(location.uri)
    console.print(f"{escape(str(target))}:{start.line + 1}:{start.character + 1}", highlight=False, soft_wrap=True)


def complete(
    file: Annotated[Path, typer.Argument(help="Helium source file to complete in.")],
    prefix: Annotated[str | None, typer.Option(help="Only show labels starting with this prefix.")] = None,
) -> None:
    """List completion candidates for a Helium source file."""
    if not file.is_file():
        console.print(f"[red]File not found:[/red] {file}")
        raise typer.Exit(1)

    service = get_service()
    items = service.complete(file.read_text(encoding="utf-8"))
    if prefix:
        items = [item for item in items if item.label.startswith(prefix)]

    table = Table(show_lines=False)
    for header in ("label", "kind", "detail"):
        table.add_column(header, no_wrap=header == "label")
    for item in items:
        table.add_row(escape(item.label), item.kind.name.lower(), escape(item.detail or ""))
    console.print(table)
    console.print(f"({len(items)} items)")


def watch(
    root: Annotated[Path, typer.Argument(help="Workspace root to watch.")],
) -> None:
    """Keep the object index current and re-check Helium files as they change."""
    if not root.is_dir():
        console.print(f"[red]Directory not found:[/red] {root}")
        raise typer.Exit(1)

    service = get_service()
    _index_roots(service, [root])

    async def _on_change(paths: set[Path]) -> None:
        for path in sorted(paths):
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                console.print(f"[red]Cannot read[/red] {escape(str(path))}: {escape(str(exc))}")
                continue
            print_diagnostics(path, service.document_changed(path_to_uri(path), text))

    async def _on_delete(paths: set[Path]) -> None:
        for path in sorted(paths):
            removed = service.file_deleted(path_to_uri(path))
            if removed:
                console.print(f"Removed {', '.join(removed)} ({escape(str(path))} deleted)")

    async def _run() -> None:
        watcher = WatchfilesWatcher(root, _on_change, _on_delete, service.settings.file_extension)
        await watcher.start()
        console.print(f"[green]Watching[/green] {root} (Ctrl+C to stop)")
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("Stopped.")
