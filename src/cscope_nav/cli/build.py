import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from cscope_nav.cli.options import CscopeOption, CwdOption, DatabaseOption, load_config
from cscope_nav.core.build import BuildCoordinator
from cscope_nav.core.engine import QueryEngine
from cscope_nav.fs.local import LocalFileReader
from cscope_nav.process import ProcessRunner
from cscope_nav.terminal.host import ConsoleStatus
from cscope_nav.watcher.watchfiles_adapter import WatchfilesWatcher

console = Console()


def build(
    cwd: CwdOption = Path("."),
    cscope: CscopeOption = None,
    database: DatabaseOption = None,
    watch: Annotated[bool, typer.Option("--watch", help="Keep rebuilding whenever a source file changes.")] = False,
    extensions: Annotated[
        str | None, typer.Option(help="Comma separated source extensions to watch (e.g. c,h).")
    ] = None,
) -> None:
    """Build the cscope database."""
    config = load_config(cscope, database, extensions=extensions)
    engine = QueryEngine(config, ProcessRunner(), LocalFileReader())
    coordinator = BuildCoordinator(engine, WatchfilesWatcher, ConsoleStatus(console))

    async def _run() -> bool:
        ok = await coordinator.rebuild(cwd)
        if not watch:
            return ok
        await coordinator.watch(cwd)
        console.print(f"[green]Watching[/green] {cwd} ({config.extensions}); Ctrl-C to stop.")
        try:
            await asyncio.Event().wait()
        finally:
            await coordinator.stop()
        return ok

    try:
        ok = asyncio.run(_run())
    except KeyboardInterrupt:
        return
    if not ok:
        raise typer.Exit(1)
