"""(Re)build the indexer database on demand or when sources change."""

from __future__ import annotations

import logging
from pathlib import Path

from cscope_nav.core.engine import QueryEngine
from cscope_nav.core.errors import CscopeNavError
from cscope_nav.core.ports.host import StatusPort
from cscope_nav.core.ports.watcher import FileEventCallback, FileWatcherFactory, FileWatcherPort

logger = logging.getLogger(__name__)


class BuildCoordinator:
    def __init__(
        self,
        engine: QueryEngine,
        watcher_factory: FileWatcherFactory,
        status: StatusPort | None = None,
    ) -> None:
        self._engine = engine
        self._watcher_factory = watcher_factory
        self._status = status
        self._watcher: FileWatcherPort | None = None

    @property
    def watching(self) -> bool:
        return self._watcher is not None

    def database_path(self, cwd: str | Path) -> Path:
        return Path(cwd) / self._engine.config.database

    def _show(self, message: str) -> None:
        if self._status is not None:
            self._status.show(message)

    async def ensure_fresh(self, cwd: str | Path) -> bool:
        """Build the database if it does not exist yet; returns whether a build ran."""
        database = self.database_path(cwd)
        if database.exists():
            logger.info("%s exists.", database)
            return False
        logger.info("%s does not exist.", database)
        await self.rebuild(cwd)
        return True

    async def rebuild(self, cwd: str | Path) -> bool:
        """Run one build; failures are reported, not raised."""
        database = self._engine.config.database
        self._show(f'Building "{database}"...')
        try:
            await self._engine.build(cwd)
        except CscopeNavError as exc:
            logger.error('Error occurred while updating "%s": %s', database, exc)
            self._show(f'Error occurred while updating "{database}".')
            return False
        logger.info('"%s" is updated.', database)
        self._show(f'"{database}" is updated.')
        return True

    async def watch(
        self,
        cwd: str | Path,
        extensions: frozenset[str] | None = None,
        on_change: FileEventCallback | None = None,
    ) -> FileWatcherPort:
        """Rebuild (or call ``on_change``) once per qualifying file event.

        Replaces any watcher registered earlier.
        """
        await self.stop()
        if extensions is None:
            extensions = self._engine.config.extension_set

        async def _rebuild(path: Path) -> None:
            logger.debug("Change detected in %s", path)
            await self.rebuild(cwd)

        logger.info("Register auto build for %s (%s)", cwd, ",".join(sorted(extensions)))
        watcher = self._watcher_factory(Path(cwd), extensions, on_change or _rebuild)
        await watcher.start()
        self._watcher = watcher
        return watcher

    async def start_auto(self, cwd: str | Path) -> bool:
        """Apply the ``auto_build`` setting: ensure a database and watch sources."""
        if not self._engine.config.auto_build:
            await self.stop()
            return False
        await self.ensure_fresh(cwd)
        await self.watch(cwd)
        return True

    async def stop(self) -> None:
        if self._watcher is None:
            return
        watcher, self._watcher = self._watcher, None
        await watcher.stop()
