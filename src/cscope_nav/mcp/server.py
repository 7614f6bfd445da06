"""FastMCP server exposing cscope-nav tools."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from cscope_nav.config import CscopeConfig
from cscope_nav.core.build import BuildCoordinator
from cscope_nav.core.engine import QueryEngine
from cscope_nav.core.history import END_OF_HISTORY, NavigationHistory
from cscope_nav.core.kinds import QueryKind
from cscope_nav.core.navigator import NO_RESULTS, Navigator
from cscope_nav.core.ports.host import PresentationMode
from cscope_nav.core.presentation import item_detail
from cscope_nav.fs.local import LocalFileReader
from cscope_nav.models import FilePosition, ResolvedItem
from cscope_nav.process import ProcessRunner
from cscope_nav.watcher.watchfiles_adapter import WatchfilesWatcher


class _SessionStatus:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def show(self, message: str) -> None:
        self.messages.append(message)


class _SessionHost:
    """The MCP client plays the editor: the last position opened is the current one."""

    def __init__(self) -> None:
        self.position: FilePosition | None = None

    def current_word(self) -> str:
        return ""

    def current_position(self) -> FilePosition | None:
        return self.position

    async def prompt_for_input(self, default: str) -> str | None:
        return default or None

    async def open_file_at(self, position: FilePosition, preview: bool = False) -> None:
        if not preview:
            self.position = position


class _ChoicePresenter:
    """Selects result number ``choice`` (1-based); any other value selects nothing."""

    def __init__(self) -> None:
        self.choice = 0

    async def select(
        self,
        items: Sequence[ResolvedItem],
        mode: PresentationMode = "list",
        on_active: Callable[[ResolvedItem], Awaitable[None]] | None = None,
    ) -> ResolvedItem | None:
        if 1 <= self.choice <= len(items):
            return items[self.choice - 1]
        return None


def _describe(item: ResolvedItem, cwd: str | Path) -> dict[str, Any]:
    return {**item.model_dump(), "location": item_detail(item, cwd)}


def create_mcp_server(
    config: CscopeConfig,
    cwd: str | Path,
    history: NavigationHistory | None = None,
) -> FastMCP:
    """Create a FastMCP server bound to one project root and one navigation history."""

    engine = QueryEngine(config, ProcessRunner(), LocalFileReader())
    status = _SessionStatus()
    history = history if history is not None else NavigationHistory(status)
    presenter = _ChoicePresenter()
    navigator = Navigator(engine, history, _SessionHost(), presenter, status, cwd)
    coordinator = BuildCoordinator(engine, WatchfilesWatcher, status)

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
        await coordinator.start_auto(cwd)
        try:
            yield
        finally:
            await coordinator.stop()

    mcp = FastMCP(
        "cscope-nav",
        instructions="Query a cscope index and navigate exact source locations.",
        lifespan=lifespan,
    )

    @mcp.tool()
    async def search(kind: str, pattern: str) -> list[dict[str, Any]] | str:
        """Query the index. kind is one of symbol, definition, callee, caller, text, egrep, file, include, set."""
        items = await navigator.search(QueryKind(kind), pattern)
        if items is None:
            return status.messages[-1]
        navigator.last_results = items
        return [_describe(item, cwd) for item in items]

    @mcp.tool()
    async def results(choice: int = 0) -> list[dict[str, Any]] | dict[str, Any] | str:
        """List the results of the last search, or jump to result number ``choice`` (1-based)."""
        presenter.choice = choice
        item = await navigator.show_results()
        if item is not None:
            return _describe(item, cwd)
        if not navigator.last_results:
            return NO_RESULTS
        return [_describe(i, cwd) for i in navigator.last_results]

    @mcp.tool()
    async def build() -> str:
        """Rebuild the cscope database."""
        if await coordinator.rebuild(cwd):
            return f'"{config.database}" is updated.'
        return f'Error occurred while updating "{config.database}".'

    @mcp.tool()
    async def push_position(file: str, line: int, column: int = 0) -> str:
        """Remember a position before jumping elsewhere."""
        history.push(FilePosition(file=file, line=line, column=column))
        return f"History depth: {len(history)}"

    @mcp.tool()
    async def pop_position() -> dict[str, Any] | str:
        """Return to the most recently remembered position."""
        position = await navigator.go_back()
        if position is None:
            return END_OF_HISTORY
        return position.model_dump()

    return mcp
