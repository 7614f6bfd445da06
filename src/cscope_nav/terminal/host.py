"""Host ports implemented on a rich terminal, used by the CLI."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from rich.console import Console
from rich.prompt import IntPrompt
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from cscope_nav.core.ports.host import PresentationMode
from cscope_nav.core.presentation import group_by_file, item_detail, item_label, relative_path, tree_label
from cscope_nav.models import FilePosition, ResolvedItem


class ConsoleStatus:
    def __init__(self, console: Console) -> None:
        self._console = console
        self.messages: list[str] = []

    def show(self, message: str) -> None:
        self.messages.append(message)
        self._console.print(Text(message, style="dim"), soft_wrap=True)


class TerminalHost:
    """Editor capabilities for a terminal session.

    The "current word" is the pattern given on the command line and opening a
    file prints a ``file:line:column`` reference (1-based) that editors and
    terminals can follow.
    """

    def __init__(self, console: Console, word: str = "", position: FilePosition | None = None) -> None:
        self._console = console
        self._word = word
        self._position = position
        self.opened: list[FilePosition] = []

    def current_word(self) -> str:
        return self._word

    def current_position(self) -> FilePosition | None:
        return self._position

    async def prompt_for_input(self, default: str) -> str | None:
        return default or None

    async def open_file_at(self, position: FilePosition, preview: bool = False) -> None:
        self.opened.append(position)
        if preview:
            return
        location = f"{position.file}:{position.line + 1}:{position.column + 1}"
        self._console.print(Text(location), soft_wrap=True)
        self._position = position


class RichPresenter:
    def __init__(self, console: Console, cwd: str | Path, interactive: bool = False) -> None:
        self._console = console
        self._cwd = cwd
        self._interactive = interactive

    def render(self, items: Sequence[ResolvedItem], mode: PresentationMode = "list") -> None:
        if mode == "tree":
            self._console.print(self._tree(items))
        else:
            self._console.print(self._table(items))
        self._console.print(f"({len(items)} results)")

    def _table(self, items: Sequence[ResolvedItem]) -> Table:
        table = Table(show_lines=False)
        table.add_column("#", justify="right")
        table.add_column("result")
        table.add_column("location")
        for index, item in enumerate(items, start=1):
            table.add_row(str(index), Text(item_label(item)), Text(item_detail(item, self._cwd)))
        return table

    def _tree(self, items: Sequence[ResolvedItem]) -> Tree:
        root = Tree("results")
        number = 0
        for file, group in group_by_file(items).items():
            branch = root.add(Text(relative_path(file, self._cwd)))
            for item in group:
                number += 1
                branch.add(Text(f"{number}. {tree_label(item)}"))
        return root

    def _ordered(self, items: Sequence[ResolvedItem], mode: PresentationMode) -> list[ResolvedItem]:
        if mode == "tree":
            return [item for group in group_by_file(items).values() for item in group]
        return list(items)

    async def select(
        self,
        items: Sequence[ResolvedItem],
        mode: PresentationMode = "list",
        on_active: Callable[[ResolvedItem], Awaitable[None]] | None = None,
    ) -> ResolvedItem | None:
        # Terminals have no hover, so ``on_active`` previews never fire here.
        ordered = self._ordered(items, mode)
        self.render(ordered, mode)
        if not ordered or not self._interactive:
            return None
        choice = IntPrompt.ask("Jump to (0 to cancel)", console=self._console, default=0)
        if choice < 1 or choice > len(ordered):
            return None
        return ordered[choice - 1]
