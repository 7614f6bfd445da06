"""Run the indexer as a subprocess, buffered or streamed line by line."""

from __future__ import annotations

import asyncio
import logging
import shlex
from collections.abc import AsyncIterator, Sequence
from pathlib import Path

from cscope_nav.core.errors import ProcessFailure, SpawnFailure

logger = logging.getLogger(__name__)

# Longest stdout line accepted from the indexer.
_LINE_LIMIT = 1 << 20


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _command_line(command: str, args: Sequence[str]) -> str:
    return shlex.join([command, *args])


async def _spawn(command: str, args: Sequence[str], cwd: str | Path) -> asyncio.subprocess.Process:
    logger.info("Running %s (cwd=%s)", _command_line(command, args), cwd)
    try:
        return await asyncio.create_subprocess_exec(
            command,
            *args,
            cwd=str(cwd),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=_LINE_LIMIT,
        )
    except OSError as exc:
        logger.error("Cannot run %s: %s", command, exc)
        raise SpawnFailure(command, exc) from exc


def _check_exit(command: str, code: int, stderr: str) -> None:
    if stderr:
        logger.error("stderr of %s (exit %d):\n%s", command, code, stderr)
    if code != 0:
        logger.error("%s exited with code %d", command, code)
        raise ProcessFailure(code, stderr.strip())
    logger.debug("%s exited with code 0", command)


async def _discard_line(stdout: asyncio.StreamReader, buffered: int) -> None:
    """Drop the rest of an over-long line, up to and including its newline."""
    while True:
        await stdout.readexactly(buffered)
        try:
            await stdout.readuntil(b"\n")
            return
        except asyncio.IncompleteReadError:
            return
        except asyncio.LimitOverrunError as exc:
            buffered = exc.consumed


class ProcessStream:
    """Stdout of a running process, exposed as an async iterator of lines.

    Iterate to receive lines as the process writes them, then ``await
    wait()`` for the exit status. Stderr is drained concurrently so a chatty
    process cannot block on a full pipe.
    """

    def __init__(self, command: str, process: asyncio.subprocess.Process) -> None:
        self.command = command
        self._process = process
        assert process.stderr is not None
        self._stderr_task = asyncio.create_task(process.stderr.read())

    async def __aiter__(self) -> AsyncIterator[str]:
        stdout = self._process.stdout
        assert stdout is not None
        while True:
            try:
                raw = await stdout.readuntil(b"\n")
            except asyncio.IncompleteReadError as exc:
                if exc.partial:
                    yield _decode(exc.partial).rstrip("\r\n")
                return
            except asyncio.LimitOverrunError as exc:
                logger.warning("Skipping stdout line of %s longer than %d bytes", self.command, _LINE_LIMIT)
                await _discard_line(stdout, exc.consumed)
                continue
            yield _decode(raw).rstrip("\r\n")

    async def wait(self) -> int:
        """Wait for exit; raises :class:`ProcessFailure` on a nonzero status."""
        stdout = self._process.stdout
        assert stdout is not None
        # Unread output would keep the process blocked on a full pipe.
        while await stdout.read(65536):
            pass
        stderr = _decode(await self._stderr_task)
        code = await self._process.wait()
        _check_exit(self.command, code, stderr)
        return code


class ProcessRunner:
    async def run(self, command: str, args: Sequence[str], cwd: str | Path) -> str:
        """Run to completion and return the trimmed stdout."""
        process = await _spawn(command, args, cwd)
        out, err = await process.communicate()
        stdout = _decode(out)
        logger.debug("stdout of %s:\n%s", command, stdout)
        _check_exit(command, process.returncode or 0, _decode(err))
        return stdout.strip()

    async def stream(self, command: str, args: Sequence[str], cwd: str | Path) -> ProcessStream:
        """Start the process and hand back its stdout line stream."""
        process = await _spawn(command, args, cwd)
        return ProcessStream(command, process)
