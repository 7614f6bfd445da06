import os
import shlex
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

_ENV_PREFIX = "CSCOPE_NAV_"


class CscopeConfig(BaseModel):
    """Settings for invoking the indexer and presenting its results."""

    model_config = ConfigDict(frozen=True)

    cscope: str = "cscope"
    database: str = "cscope.out"
    build_args: str = "-Rbq"
    query_args: str = "-dL"
    extensions: str = "c,h,cc,cpp,cxx,hh,hpp"
    auto_build: bool = False
    preview: bool = True
    output: Literal["list", "tree"] = "list"
    max_concurrency: int = Field(default=64, ge=1)

    @classmethod
    def from_env(cls, **overrides: object) -> "CscopeConfig":
        """Build a config from ``CSCOPE_NAV_*`` variables; ``None`` overrides are ignored."""
        values: dict[str, object] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{_ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)

    def build_argv(self) -> list[str]:
        return [*shlex.split(self.build_args), "-f", self.database]

    def query_argv(self, flag: str, pattern: str) -> list[str]:
        return [*shlex.split(self.query_args), "-f", self.database, flag, pattern]

    @property
    def extension_set(self) -> frozenset[str]:
        """Watched suffixes, normalized to ``.ext`` form."""
        parts = (p.strip().lstrip(".").lower() for p in self.extensions.split(","))
        return frozenset(f".{p}" for p in parts if p)
