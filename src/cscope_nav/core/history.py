import logging

from cscope_nav.core.ports.host import StatusPort
from cscope_nav.models import FilePosition

logger = logging.getLogger(__name__)

END_OF_HISTORY = "End of history."


class NavigationHistory:
    """LIFO stack of positions the user jumped away from.

    Positions are stored as given: no bound, no deduplication and no check
    that the file still exists.
    """

    def __init__(self, status: StatusPort | None = None) -> None:
        self._status = status
        self._positions: list[FilePosition] = []

    def __len__(self) -> int:
        return len(self._positions)

    def push(self, position: FilePosition) -> FilePosition:
        self._positions.append(position)
        logger.debug("Pushed %s:%d:%d (depth %d)", position.file, position.line, position.column, len(self))
        return position

    def pop(self) -> FilePosition | None:
        if not self._positions:
            logger.warning(END_OF_HISTORY)
            if self._status is not None:
                self._status.show(END_OF_HISTORY)
            return None
        return self._positions.pop()
