import re

from cscope_nav.core.errors import ParseError
from cscope_nav.models import RawHit

# file, function, line number, rest of line. File names containing spaces
# are not supported.
_LINE_RE = re.compile(r"([^ ]*) +([^ ]*) +([^ ]*) (.*)")


def parse_line(line: str) -> RawHit:
    """Parse one line of indexer output into a :class:`RawHit`.

    The emitted 1-based line number is converted to 0-based.
    """
    match = _LINE_RE.match(line)
    if match is None:
        raise ParseError(line)
    file, symbol, lnum, rest = match.groups()
    if not file or not symbol:
        raise ParseError(line)
    try:
        line_number = int(lnum) - 1
    except ValueError:
        raise ParseError(line) from None
    if line_number < 0:
        raise ParseError(line)
    return RawHit(
        file=file,
        symbol=symbol,
        line_number=line_number,
        trailing_text=rest,
        original_line=line,
    )
