import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from cscope_nav.cli.options import CscopeOption, CwdOption, DatabaseOption, load_config
from cscope_nav.config import CscopeConfig
from cscope_nav.core.engine import QueryEngine
from cscope_nav.core.history import NavigationHistory
from cscope_nav.core.kinds import QueryKind
from cscope_nav.core.navigator import Navigator
from cscope_nav.fs.local import LocalFileReader
from cscope_nav.process import ProcessRunner
from cscope_nav.terminal.host import ConsoleStatus, RichPresenter, TerminalHost

console = Console()


def _navigator(config: CscopeConfig, cwd: Path, word: str, interactive: bool = False) -> Navigator:
    status = ConsoleStatus(console)
    engine = QueryEngine(config, ProcessRunner(), LocalFileReader(), discard_superseded=True)
    return Navigator(
        engine,
        NavigationHistory(status),
        TerminalHost(console, word=word),
        RichPresenter(console, cwd, interactive=interactive),
        status,
        cwd,
    )


def query(
    kind: Annotated[QueryKind, typer.Argument(help="What to search for.", case_sensitive=False)],
    pattern: Annotated[str, typer.Argument(help="Symbol, text or file pattern.")],
    cwd: CwdOption = Path("."),
    cscope: CscopeOption = None,
    database: DatabaseOption = None,
    tree: Annotated[bool, typer.Option("--tree", help="Group results per file.")] = False,
    pick: Annotated[bool, typer.Option("--pick", help="Choose a result to jump to.")] = False,
) -> None:
    """Query the database and list resolved locations."""
    config = load_config(cscope, database, output="tree" if tree else None)
    navigator = _navigator(config, cwd, pattern, interactive=pick)

    async def _run() -> bool:
        items = await navigator.search(kind, pattern)
        if items is None:
            return False
        await navigator.pick(items)
        return True

    if not asyncio.run(_run()):
        raise typer.Exit(1)


def calls(
    name: Annotated[str, typer.Argument(help="Function name.")],
    cwd: CwdOption = Path("."),
    cscope: CscopeOption = None,
    database: DatabaseOption = None,
    incoming: Annotated[
        bool, typer.Option("--incoming/--outgoing", help="Functions calling NAME, or functions NAME calls.")
    ] = True,
) -> None:
    """Show the call hierarchy of a function."""
    navigator = _navigator(load_config(cscope, database), cwd, name)

    async def _run() -> None:
        items = await (navigator.incoming_calls(name) if incoming else navigator.outgoing_calls(name))
        table = Table(title=f"{'Callers of' if incoming else 'Calls made by'} {name}")
        table.add_column("function")
        table.add_column("detail")
        for item in items:
            table.add_row(Text(item.name), Text(item.detail))
        console.print(table)
        console.print(f"({len(items)} calls)")

    asyncio.run(_run())
