from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cscope_nav.models import RawHit


class QueryKind(str, Enum):
    """Indexer query kinds.

    Each member carries the indexer flag selecting the query and whether the
    token to locate on a result line is the hit's own symbol (``callee``)
    rather than the searched pattern.
    """

    flag: str
    searches_symbol: bool

    def __new__(cls, value: str, flag: str, searches_symbol: bool = False) -> QueryKind:
        member = str.__new__(cls, value)
        member._value_ = value
        member.flag = flag
        member.searches_symbol = searches_symbol
        return member

    SYMBOL = ("symbol", "-0")
    DEFINITION = ("definition", "-1")
    CALLEE = ("callee", "-2", True)
    CALLER = ("caller", "-3")
    TEXT = ("text", "-4")
    EGREP = ("egrep", "-5")
    FILE = ("file", "-6")
    INCLUDE = ("include", "-7")
    SET = ("set", "-8")

    def search_token(self, pattern: str, hit: RawHit) -> str:
        return hit.symbol if self.searches_symbol else pattern
