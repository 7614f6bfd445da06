import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from cscope_nav.cli.build import build
from cscope_nav.cli.query import calls, query
from cscope_nav.cli.serve import serve_app

app = typer.Typer(
    name="cscope-nav",
    help="cscope-nav: query a cscope index and jump to exact source locations.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log indexer commands and diagnostics.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app.command("build")(build)
app.command("query")(query)
app.command("calls")(calls)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
