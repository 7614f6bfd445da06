"""Editor-facing flows: query and jump, jump back, definitions, call hierarchy."""

from __future__ import annotations

import logging
from pathlib import Path

from cscope_nav.core.engine import QueryEngine
from cscope_nav.core.errors import CscopeNavError
from cscope_nav.core.history import NavigationHistory
from cscope_nav.core.kinds import QueryKind
from cscope_nav.core.ports.host import EditorHost, ResultPresenter, StatusPort
from cscope_nav.core.presentation import CallHierarchyItem, sort_items, to_call_hierarchy
from cscope_nav.models import FilePosition, QuerySpec, ResolvedItem

logger = logging.getLogger(__name__)

NO_RESULTS = "No results to show."


class Navigator:
    def __init__(
        self,
        engine: QueryEngine,
        history: NavigationHistory,
        host: EditorHost,
        presenter: ResultPresenter,
        status: StatusPort,
        cwd: str | Path,
    ) -> None:
        self._engine = engine
        self._history = history
        self._host = host
        self._presenter = presenter
        self._status = status
        self._cwd = cwd
        self.last_results: list[ResolvedItem] = []

    async def search(self, kind: QueryKind, pattern: str) -> list[ResolvedItem] | None:
        """Run one query; failures are logged and reported, returning ``None``."""
        spec = QuerySpec(kind=kind, pattern=pattern)
        self._status.show(f'Querying "{pattern}"...')
        try:
            items = await self._engine.query(spec, self._cwd)
        except CscopeNavError as exc:
            logger.error("cannot query %s %r: %s", kind.value, pattern, exc)
            self._status.show(f'Error occurred while querying "{pattern}": {exc}')
            return None
        return sort_items(items)

    async def query(self, kind: QueryKind) -> ResolvedItem | None:
        """Prompt for a pattern, run the query and jump to the picked result."""
        pattern = await self._host.prompt_for_input(self._host.current_word())
        if not pattern:
            self._status.show("Cannot get pattern from the input box.")
            return None
        items = await self.search(kind, pattern)
        if items is None:
            return None
        self.last_results = items
        return await self.pick(items)

    async def pick(self, items: list[ResolvedItem]) -> ResolvedItem | None:
        """Let the presenter choose a result; jump there and remember where we were."""
        config = self._engine.config
        on_active = self.preview if config.preview else None
        item = await self._presenter.select(items, mode=config.output, on_active=on_active)
        if item is None:
            return None
        current = self._host.current_position()
        if current is not None:
            self._history.push(current)
        await self._host.open_file_at(item.position)
        return item

    async def show_results(self) -> ResolvedItem | None:
        """Pick again from the results of the last query."""
        if not self.last_results:
            self._status.show(NO_RESULTS)
            return None
        return await self.pick(self.last_results)

    async def preview(self, item: ResolvedItem) -> None:
        await self._host.open_file_at(item.position, preview=True)

    async def go_back(self) -> FilePosition | None:
        position = self._history.pop()
        if position is not None:
            await self._host.open_file_at(position)
        return position

    async def definitions(self, word: str) -> list[ResolvedItem]:
        return await self.search(QueryKind.DEFINITION, word) or []

    async def references(self, word: str) -> list[ResolvedItem]:
        return await self.search(QueryKind.SYMBOL, word) or []

    async def incoming_calls(self, name: str) -> list[CallHierarchyItem]:
        items = await self.search(QueryKind.CALLER, name) or []
        return to_call_hierarchy(items, self._cwd)

    async def outgoing_calls(self, name: str) -> list[CallHierarchyItem]:
        items = await self.search(QueryKind.CALLEE, name) or []
        return to_call_hierarchy(items, self._cwd)
