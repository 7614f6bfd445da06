"""Tests for database (re)building and the auto-build watcher wiring."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from cscope_nav.core.build import BuildCoordinator
from cscope_nav.core.engine import QueryEngine
from cscope_nav.core.ports.watcher import FileEventCallback
from cscope_nav.fs.local import LocalFileReader
from cscope_nav.process import ProcessRunner

if TYPE_CHECKING:
    from tests.conftest import FakeIndexer


class _Status:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def show(self, message: str) -> None:
        self.messages.append(message)


class _FakeWatcher:
    def __init__(self, directory: Path, extensions: frozenset[str], on_event: FileEventCallback) -> None:
        self.directory = directory
        self.extensions = extensions
        self.on_event = on_event
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True


class _WatcherFactory:
    def __init__(self) -> None:
        self.created: list[_FakeWatcher] = []

    def __call__(self, directory: Path, extensions: frozenset[str], on_event: FileEventCallback) -> _FakeWatcher:
        watcher = _FakeWatcher(directory, extensions, on_event)
        self.created.append(watcher)
        return watcher


def _coordinator(fake_indexer: FakeIndexer, **config: object) -> tuple[BuildCoordinator, _WatcherFactory, _Status]:
    engine = QueryEngine(fake_indexer.config(**config), ProcessRunner(), LocalFileReader())
    factory = _WatcherFactory()
    status = _Status()
    return BuildCoordinator(engine, factory, status), factory, status


@pytest.mark.asyncio
async def test_ensure_fresh_builds_when_database_is_missing(fake_indexer: FakeIndexer, project: Path) -> None:
    coordinator, _, status = _coordinator(fake_indexer)

    assert await coordinator.ensure_fresh(project) is True
    assert fake_indexer.calls == [["-f", "cscope.out"]]
    assert status.messages == ['Building "cscope.out"...', '"cscope.out" is updated.']


@pytest.mark.asyncio
async def test_ensure_fresh_skips_existing_database(fake_indexer: FakeIndexer, project: Path) -> None:
    (project / "cscope.out").write_text("index", encoding="utf-8")
    coordinator, _, _ = _coordinator(fake_indexer)

    assert await coordinator.ensure_fresh(project) is False
    assert fake_indexer.calls == []


@pytest.mark.asyncio
async def test_rebuild_failure_is_reported_not_raised(
    fake_indexer: FakeIndexer, project: Path, caplog: pytest.LogCaptureFixture
) -> None:
    fake_indexer.reply(stderr="cscope: cannot write", exit_code=1)
    coordinator, _, status = _coordinator(fake_indexer)

    assert await coordinator.rebuild(project) is False
    assert status.messages[-1] == 'Error occurred while updating "cscope.out".'
    assert "cscope: cannot write" in caplog.text


@pytest.mark.asyncio
async def test_rebuild_spawn_failure_is_reported(project: Path) -> None:
    from cscope_nav.config import CscopeConfig

    engine = QueryEngine(CscopeConfig(cscope="no-such-indexer-binary"), ProcessRunner(), LocalFileReader())
    coordinator = BuildCoordinator(engine, _WatcherFactory())

    assert await coordinator.rebuild(project) is False


@pytest.mark.asyncio
async def test_every_file_event_triggers_one_rebuild(fake_indexer: FakeIndexer, project: Path) -> None:
    coordinator, factory, _ = _coordinator(fake_indexer, extensions="c,h")

    await coordinator.watch(project)
    watcher = factory.created[0]
    assert watcher.started
    assert watcher.extensions == frozenset({".c", ".h"})
    assert watcher.directory == project

    for name in ("a.c", "a.c", "b.h"):
        await watcher.on_event(project / name)

    assert len(fake_indexer.calls) == 3


@pytest.mark.asyncio
async def test_watch_with_custom_callback(fake_indexer: FakeIndexer, project: Path) -> None:
    coordinator, factory, _ = _coordinator(fake_indexer)
    seen: list[Path] = []

    async def _record(path: Path) -> None:
        seen.append(path)

    await coordinator.watch(project, frozenset({".py"}), _record)
    await factory.created[0].on_event(project / "x.py")

    assert seen == [project / "x.py"]
    assert fake_indexer.calls == []


@pytest.mark.asyncio
async def test_watch_replaces_previous_watcher(fake_indexer: FakeIndexer, project: Path) -> None:
    coordinator, factory, _ = _coordinator(fake_indexer)

    await coordinator.watch(project)
    await coordinator.watch(project)

    assert factory.created[0].stopped
    assert not factory.created[1].stopped
    await coordinator.stop()
    assert factory.created[1].stopped
    assert not coordinator.watching


@pytest.mark.asyncio
async def test_start_auto_disabled_does_nothing(fake_indexer: FakeIndexer, project: Path) -> None:
    coordinator, factory, _ = _coordinator(fake_indexer)

    assert await coordinator.start_auto(project) is False
    assert factory.created == []
    assert fake_indexer.calls == []


@pytest.mark.asyncio
async def test_start_auto_builds_and_watches(fake_indexer: FakeIndexer, project: Path) -> None:
    coordinator, factory, _ = _coordinator(fake_indexer, auto_build=True)

    assert await coordinator.start_auto(project) is True
    assert len(fake_indexer.calls) == 1
    assert coordinator.watching
    assert factory.created[0].started
    await coordinator.stop()
