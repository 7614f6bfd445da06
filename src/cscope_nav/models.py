from pydantic import BaseModel, ConfigDict, field_validator

from cscope_nav.core.kinds import QueryKind


class FilePosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    line: int
    column: int = 0


class QuerySpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: QueryKind
    pattern: str

    @field_validator("pattern")
    @classmethod
    def _pattern_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("pattern must not be empty")
        return value


class RawHit(BaseModel):
    """One parsed line of indexer output; ``line_number`` is 0-based."""

    model_config = ConfigDict(frozen=True)

    file: str
    symbol: str
    line_number: int
    trailing_text: str
    original_line: str


class ResolvedItem(BaseModel):
    """A hit located precisely by re-reading its source line."""

    model_config = ConfigDict(frozen=True)

    file: str
    symbol: str
    line: int
    column: int
    length: int
    line_text: str
    trailing_text: str = ""

    @property
    def position(self) -> FilePosition:
        return FilePosition(file=self.file, line=self.line, column=self.column)
