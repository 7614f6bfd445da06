from pathlib import Path

import typer
from rich.console import Console

from cscope_nav.cli.options import CscopeOption, CwdOption, DatabaseOption, load_config

serve_app = typer.Typer(help="Start servers.")
console = Console(stderr=True)


@serve_app.command("mcp")
def mcp(
    cwd: CwdOption = Path("."),
    cscope: CscopeOption = None,
    database: DatabaseOption = None,
    transport: str = "stdio",
) -> None:
    """Start the MCP server."""
    from cscope_nav.mcp.server import create_mcp_server

    server = create_mcp_server(load_config(cscope, database), cwd)
    console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]
