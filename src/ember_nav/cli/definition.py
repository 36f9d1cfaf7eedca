from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from ember_nav.core.definition import DefinitionProvider
from ember_nav.core.languages import UnsupportedDocumentError, document_kind
from ember_nav.models import Location, Position
from ember_nav.project.documents import DocumentCache, path_to_uri
from ember_nav.project.roots import ProjectRoots

console = Console()

FileArgument = Annotated[Path, typer.Argument(help="Template (.hbs) or script (.js/.ts) file.")]
LineArgument = Annotated[int, typer.Argument(min=0, help="Zero-based line of the cursor.")]
CharacterArgument = Annotated[int, typer.Argument(min=0, help="Zero-based character of the cursor.")]
RootOption = Annotated[Path | None, typer.Option(help="Project root. Discovered from the file when omitted.")]


def _get_provider(root: Path | None) -> DefinitionProvider:
    projects = ProjectRoots([root] if root is not None else [])
    return DefinitionProvider(projects, DocumentCache())


def _require_document(file: Path) -> None:
    if not file.is_file():
        console.print(f"[red]File not found:[/red] {file}")
        raise typer.Exit(code=1)
    try:
        document_kind(file)
    except UnsupportedDocumentError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from None


def _render_locations(locations: list[Location]) -> None:
    table = Table(show_lines=False)
    for header in ("uri", "line", "character"):
        table.add_column(header)
    for location in locations:
        start = location.range.start
        table.add_row(location.uri, str(start.line), str(start.character))
    console.print(table)
    console.print(f"({len(locations)} locations)")


def definition(
    file: FileArgument,
    line: LineArgument,
    character: CharacterArgument,
    root: RootOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Print locations as JSON.")] = False,
) -> None:
    """Resolve the definition of the reference under the cursor."""
    _require_document(file)
    provider = _get_provider(root)
    locations = provider.resolve_definition(path_to_uri(file), Position(line=line, character=character)) or []
    if json_output:
        console.print_json(data=[location.model_dump(mode="json") for location in locations])
    else:
        _render_locations(locations)


def classify(
    file: FileArgument,
    line: LineArgument,
    character: CharacterArgument,
    root: RootOption = None,
) -> None:
    """Show which kind of reference sits under the cursor."""
    _require_document(file)
    provider = _get_provider(root)
    focused = provider.reference_at(path_to_uri(file), Position(line=line, character=character))
    if focused is None:
        console.print("(no reference)")
        return
    console.print(f"[green]{focused.reference.kind}[/green] in project {focused.project.root}")
    console.print_json(data=focused.reference.model_dump(mode="json"))
