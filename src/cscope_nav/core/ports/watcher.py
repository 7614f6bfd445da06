from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any, Protocol

FileEventCallback = Callable[[Path], Coroutine[Any, Any, None]]


class FileWatcherPort(Protocol):
    async def start(self) -> None: ...

    async def stop(self) -> None: ...


class FileWatcherFactory(Protocol):
    def __call__(
        self,
        directory: Path,
        extensions: frozenset[str],
        on_event: FileEventCallback,
    ) -> FileWatcherPort: ...
