"""CLI application for list query options."""

import logging

import typer
from rich.logging import RichHandler

from listopts.cli.commands.query import build, labels, split
from listopts.cli.common.options import VerboseOpt
from listopts.cli.common.output import console

app = typer.Typer(
    help="listopts - build and validate paginated list queries",
    no_args_is_help=True,
)


@app.callback()
def _init(verbose: bool = VerboseOpt):
    """Configure logging for this invocation."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


app.command()(build)
app.command()(labels)
app.command()(split)


if __name__ == "__main__":
    app()
