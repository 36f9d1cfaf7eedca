from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

serve_app = typer.Typer(help="Start servers.")
console = Console(stderr=True)


@serve_app.command("mcp")
def mcp(
    transport: str = "stdio",
    root: Annotated[list[Path] | None, typer.Option(help="Project root to register. Repeatable.")] = None,
) -> None:
    """Start the MCP server."""
    from ember_nav.core.definition import DefinitionProvider
    from ember_nav.mcp.server import create_mcp_server
    from ember_nav.project.documents import DocumentCache
    from ember_nav.project.roots import ProjectRoots

    documents = DocumentCache()
    provider = DefinitionProvider(ProjectRoots(root or []), documents)
    server = create_mcp_server(provider, documents)
    console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]
