"""Query orchestration: spawn the indexer, parse its output, resolve hits."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from pathlib import Path

from cscope_nav.config import CscopeConfig
from cscope_nav.core.errors import ParseError, ProcessFailure
from cscope_nav.core.parser import parse_line
from cscope_nav.core.ports.host import FileReader
from cscope_nav.core.resolver import resolve_hit
from cscope_nav.models import QuerySpec, RawHit, ResolvedItem
from cscope_nav.process.runner import ProcessRunner, ProcessStream

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    SETTLED = "settled"
    FAILED = "failed"


class QueryRun:
    """One query invocation and the resolution work it spawned.

    ``items`` grows while the run is in flight; it is complete once the run
    is settled. Item order follows resolution completion, not indexer output.
    """

    def __init__(self, spec: QuerySpec, cwd: str | Path, generation: int) -> None:
        self.spec = spec
        self.cwd = cwd
        self.generation = generation
        self.state = RunState.IDLE
        self.hits: list[RawHit] = []
        self.items: list[ResolvedItem] = []
        self.error: ProcessFailure | None = None
        self._consumer: asyncio.Task[None] | None = None
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def pending(self) -> int:
        return sum(1 for t in self._tasks if not t.done())

    @property
    def settled(self) -> bool:
        return self.state in (RunState.SETTLED, RunState.FAILED)

    def __repr__(self) -> str:
        return (
            f"QueryRun(kind={self.spec.kind.value!r}, pattern={self.spec.pattern!r}, "
            f"state={self.state.value}, hits={len(self.hits)}, items={len(self.items)})"
        )


class QueryEngine:
    def __init__(
        self,
        config: CscopeConfig,
        runner: ProcessRunner,
        reader: FileReader,
        discard_superseded: bool = False,
    ) -> None:
        self._config = config
        self._runner = runner
        self._reader = reader
        self._discard_superseded = discard_superseded
        self._limit = asyncio.Semaphore(config.max_concurrency)
        self._generation = 0

    @property
    def config(self) -> CscopeConfig:
        return self._config

    def query_command(self, spec: QuerySpec) -> list[str]:
        return [self._config.cscope, *self._config.query_argv(spec.kind.flag, spec.pattern)]

    def build_command(self) -> list[str]:
        return [self._config.cscope, *self._config.build_argv()]

    def is_superseded(self, run: QueryRun) -> bool:
        return run.generation != self._generation

    async def start(self, spec: QuerySpec, cwd: str | Path) -> QueryRun:
        """Spawn the indexer for ``spec`` and begin resolving its output.

        Raises ``SpawnFailure`` if the indexer cannot be started. Earlier runs
        are left untouched, and a failed spawn does not supersede them.
        """
        command, *args = self.query_command(spec)
        stream = await self._runner.stream(command, args, cwd)
        self._generation += 1
        run = QueryRun(spec, cwd, self._generation)
        run.state = RunState.RUNNING
        run._consumer = asyncio.create_task(self._consume(run, stream))
        return run

    async def settle(self, run: QueryRun) -> list[ResolvedItem]:
        """Wait until the process has exited and every resolution finished.

        Raises ``ProcessFailure`` when the indexer exited with an error.
        """
        if run._consumer is None:
            raise RuntimeError(f"{run!r} was never started")
        await run._consumer
        return list(run.items)

    async def query(self, spec: QuerySpec, cwd: str | Path) -> list[ResolvedItem]:
        run = await self.start(spec, cwd)
        return await self.settle(run)

    async def build(self, cwd: str | Path) -> str:
        command, *args = self.build_command()
        return await self._runner.run(command, args, cwd)

    async def _consume(self, run: QueryRun, stream: ProcessStream) -> None:
        try:
            await self._read(run, stream)
        except ProcessFailure as exc:
            run.error = exc
            run.state = RunState.FAILED
            await asyncio.gather(*run._tasks)
            raise
        run.state = RunState.DRAINING
        await asyncio.gather(*run._tasks)
        run.state = RunState.SETTLED
        logger.info("%r settled", run)

    async def _read(self, run: QueryRun, stream: ProcessStream) -> None:
        try:
            async for line in stream:
                try:
                    hit = parse_line(line)
                except ParseError:
                    logger.warning("cannot parse: %r", line)
                    continue
                run.hits.append(hit)
                run._tasks.append(asyncio.create_task(self._resolve(run, hit)))
        finally:
            await stream.wait()

    async def _resolve(self, run: QueryRun, hit: RawHit) -> None:
        if self._discard_superseded and self.is_superseded(run):
            return
        token = run.spec.kind.search_token(run.spec.pattern, hit)
        item = await resolve_hit(hit, token, self._reader, run.cwd, self._limit)
        if item is None:
            return
        if self._discard_superseded and self.is_superseded(run):
            logger.debug("Dropping result of superseded %r", run)
            return
        run.items.append(item)
