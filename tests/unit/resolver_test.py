"""Tests for locating hits on their source line."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from cscope_nav.core.resolver import absolute_path, locate, resolve_hit
from cscope_nav.fs.local import LocalFileReader
from cscope_nav.models import RawHit


def _hit(file: str, line_number: int, symbol: str = "foo") -> RawHit:
    return RawHit(file=file, symbol=symbol, line_number=line_number, trailing_text="text", original_line="raw")


class _MemoryReader:
    def __init__(self, files: dict[str, list[str]]) -> None:
        self.files = files
        self.reads = 0

    async def read_line(self, path: str, line: int) -> str:
        self.reads += 1
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path][line]


def test_locate_found() -> None:
    assert locate("int foo(void) {", "foo") == (4, 3)


def test_locate_missing_token_is_zero_span() -> None:
    assert locate("int bar(void) {", "foo") == (0, 0)


def test_locate_empty_token_is_zero_span() -> None:
    assert locate("int bar(void) {", "") == (0, 0)


def test_locate_is_literal_not_regex() -> None:
    assert locate("a.b(x)", ".b(") == (1, 3)
    assert locate("axb", ".b") == (0, 0)


def test_absolute_path() -> None:
    assert absolute_path("a.c", "/work") == "/work/a.c"
    assert absolute_path("/usr/include/stdio.h", "/work") == "/usr/include/stdio.h"


@pytest.mark.asyncio
async def test_resolve_hit_locates_token() -> None:
    reader = _MemoryReader({"/work/a.c": ["", "int foo(void) {"]})

    item = await resolve_hit(_hit("a.c", 1), "foo", reader, "/work")

    assert item is not None
    assert item.file == "/work/a.c"
    assert (item.line, item.column, item.length) == (1, 4, 3)
    assert item.line_text == "int foo(void) {"
    assert item.trailing_text == "text"


@pytest.mark.asyncio
async def test_resolve_hit_stale_line_keeps_item_at_column_zero() -> None:
    reader = _MemoryReader({"/work/a.c": ["/* moved */"]})

    item = await resolve_hit(_hit("a.c", 0), "foo", reader, "/work")

    assert item is not None
    assert (item.column, item.length) == (0, 0)


@pytest.mark.asyncio
async def test_resolve_hit_unreadable_file_is_dropped(caplog: pytest.LogCaptureFixture) -> None:
    reader = _MemoryReader({})

    item = await resolve_hit(_hit("gone.c", 0), "foo", reader, "/work")

    assert item is None
    assert "Could not open '/work/gone.c'" in caplog.text


@pytest.mark.asyncio
async def test_resolve_hit_is_idempotent() -> None:
    reader = _MemoryReader({"/work/a.c": ["int foo;"]})
    hit = _hit("a.c", 0)

    first = await resolve_hit(hit, "foo", reader, "/work")
    second = await resolve_hit(hit, "foo", reader, "/work")

    assert first == second


@pytest.mark.asyncio
async def test_resolve_hit_respects_concurrency_limit() -> None:
    active = 0
    peak = 0

    class _SlowReader:
        async def read_line(self, path: str, line: int) -> str:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return "foo"

    limit = asyncio.Semaphore(2)
    reader = _SlowReader()
    items = await asyncio.gather(*(resolve_hit(_hit("a.c", i), "foo", reader, "/w", limit) for i in range(10)))

    assert len([i for i in items if i is not None]) == 10
    assert peak == 2


@pytest.mark.asyncio
async def test_local_reader_reads_one_line(project: Path) -> None:
    reader = LocalFileReader()

    assert await reader.read_line(str(project / "a.c"), 2) == "int foo(void) {"


@pytest.mark.asyncio
async def test_local_reader_line_past_end_raises(project: Path) -> None:
    with pytest.raises(IndexError):
        await LocalFileReader().read_line(str(project / "a.c"), 100)


@pytest.mark.asyncio
async def test_local_reader_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        await LocalFileReader().read_line(str(tmp_path / "missing.c"), 0)
