import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from weave_schema.cli.schema import schema

app = typer.Typer(
    name="weave",
    help="Weave CLI — generate vector store schemas from Go struct definitions.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("schema")(schema)


@app.callback()
def configure(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", envvar="WEAVE_VERBOSE", help="Enable debug logging.")
    ] = False,
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main() -> None:
    app()
