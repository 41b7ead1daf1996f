from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from weave_schema.core.schema import generate_schema
from weave_schema.errors import WeaveError

console = Console()
err_console = Console(stderr=True)


def schema(
    src_dir: Annotated[Path, typer.Argument(help="Directory containing the Go source files.")],
    pretty: Annotated[bool, typer.Option("--pretty", "-p", help="Pretty-print the JSON output.")] = False,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file for the generated schema.")] = None,
) -> None:
    """Generate a schema from the marked Go structs in SRC_DIR."""
    try:
        document = generate_schema(src_dir)
    except WeaveError as exc:
        err_console.print(f"[red]Error generating schema:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    json_output = document.to_json(pretty=pretty)

    if output is None:
        # plain echo: rich would treat "[...]" in data types as markup
        typer.echo(json_output)
        return

    try:
        output.write_text(json_output, encoding="utf-8")
    except OSError as exc:
        err_console.print(f"[red]Error writing to output file:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
    console.print(f"[green]Schema successfully written to[/green] {output}")
