"""Options shared by the CLI commands."""

from pathlib import Path
from typing import Annotated

import typer

from cscope_nav.config import CscopeConfig

CwdOption = Annotated[
    Path,
    typer.Option("--cwd", help="Project root holding the database.", exists=True, file_okay=False, resolve_path=True),
]
CscopeOption = Annotated[str | None, typer.Option("--cscope", help="Indexer executable.")]
DatabaseOption = Annotated[str | None, typer.Option("--database", "-f", help="Database file, relative to --cwd.")]


def load_config(cscope: str | None = None, database: str | None = None, **overrides: object) -> CscopeConfig:
    return CscopeConfig.from_env(cscope=cscope, database=database, **overrides)
