import asyncio
from itertools import islice
from pathlib import Path


def _read_line(path: Path, line: int) -> str:
    with path.open(encoding="utf-8", errors="replace") as handle:
        for text in islice(handle, line, line + 1):
            return text.rstrip("\r\n")
    raise IndexError(f"{path} has no line {line + 1}")


class LocalFileReader:
    """Read single source lines from the local file system.

    Implements the ``FileReader`` protocol. Reads run in a worker thread so
    many resolutions can proceed while the event loop keeps streaming output.
    """

    async def read_line(self, path: str, line: int) -> str:
        if line < 0:
            raise IndexError(f"negative line {line}")
        return await asyncio.to_thread(_read_line, Path(path), line)
