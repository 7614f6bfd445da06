from collections.abc import Awaitable, Callable, Sequence
from typing import Literal, Protocol

from cscope_nav.models import FilePosition, ResolvedItem

PresentationMode = Literal["list", "tree"]


class FileReader(Protocol):
    async def read_line(self, path: str, line: int) -> str: ...


class StatusPort(Protocol):
    def show(self, message: str) -> None: ...


class EditorHost(Protocol):
    async def open_file_at(self, position: FilePosition, preview: bool = False) -> None: ...

    def current_word(self) -> str: ...

    def current_position(self) -> FilePosition | None: ...

    async def prompt_for_input(self, default: str) -> str | None: ...


class ResultPresenter(Protocol):
    async def select(
        self,
        items: Sequence[ResolvedItem],
        mode: PresentationMode = "list",
        on_active: Callable[[ResolvedItem], Awaitable[None]] | None = None,
    ) -> ResolvedItem | None: ...
