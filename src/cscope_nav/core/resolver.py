"""Locate the exact column of a raw hit by re-reading its source line."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from cscope_nav.core.ports.host import FileReader
from cscope_nav.models import RawHit, ResolvedItem

logger = logging.getLogger(__name__)


def absolute_path(file: str, cwd: str | Path) -> str:
    if os.path.isabs(file):
        return file
    return os.path.join(str(cwd), file)


def locate(line_text: str, token: str) -> tuple[int, int]:
    """Return ``(column, length)`` of ``token`` in ``line_text``.

    A token missing from the line (stale index) yields ``(0, 0)`` so the hit
    stays visitable.
    """
    column = line_text.find(token) if token else -1
    if column < 0:
        return 0, 0
    return column, len(token)


async def resolve_hit(
    hit: RawHit,
    search_token: str,
    reader: FileReader,
    cwd: str | Path,
    limit: asyncio.Semaphore | None = None,
) -> ResolvedItem | None:
    """Resolve one hit; returns ``None`` when its file cannot be read."""
    path = absolute_path(hit.file, cwd)
    try:
        if limit is None:
            line_text = await reader.read_line(path, hit.line_number)
        else:
            async with limit:
                line_text = await reader.read_line(path, hit.line_number)
    except (OSError, UnicodeError, IndexError) as exc:
        logger.warning("Could not open %r: %s", path, exc)
        return None

    column, length = locate(line_text, search_token)
    return ResolvedItem(
        file=path,
        symbol=hit.symbol,
        line=hit.line_number,
        column=column,
        length=length,
        line_text=line_text,
        trailing_text=hit.trailing_text,
    )
