from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path

from watchfiles import Change, awatch

from cscope_nav.core.ports.watcher import FileEventCallback

logger = logging.getLogger(__name__)


def _is_watched_file(path: Path, extensions: frozenset[str]) -> bool:
    return path.suffix.lower() in extensions


class WatchfilesWatcher:
    """Watch a directory tree and call back once per matching file event.

    Implements the ``FileWatcherPort`` protocol. Events are not coalesced:
    a batch with three matching changes produces three callbacks.
    """

    def __init__(
        self,
        directory: str | Path,
        extensions: frozenset[str],
        on_event: FileEventCallback,
    ) -> None:
        self._directory = Path(directory)
        self._extensions = extensions
        self._on_event = on_event
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    async def _watch(self) -> None:
        async for changes in awatch(self._directory):
            for change, raw in sorted(changes, key=lambda c: c[1]):
                path = Path(raw)
                if not _is_watched_file(path, self._extensions):
                    continue
                logger.info("%s: %s", Change(change).name, path)
                try:
                    await self._on_event(path)
                except Exception:
                    logger.exception("Error in watcher callback")
