import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from helium_dsl.cli.lint import lint, rules
from helium_dsl.cli.workspace import complete, definition, index, watch

app = typer.Typer(
    name="helium-dsl",
    help="Helium DSL tooling: lint, navigate and complete Helium source files.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log scanner and index activity.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app.command("lint")(lint)
app.command("rules")(rules)
app.command("index")(index)
app.command("definition")(definition)
app.command("complete")(complete)
app.command("watch")(watch)


def main() -> None:
    app()
