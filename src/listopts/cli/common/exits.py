"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer
from rich.markup import escape

from listopts.cli.common.output import out
from listopts.core.errors import StatusCode, StatusError

EXIT_CODES: dict[StatusCode, int] = {
    StatusCode.INVALID_ARGUMENT: 2,
    StatusCode.INTERNAL: 1,
}


def exit_from_status_error(exc: StatusError) -> NoReturn:
    """
    Print a status error as `<Code>: <message>` and exit.

    The exit code depends on the error's status code, see EXIT_CODES.
    """
    out.error(f"{exc.code.value}: {escape(exc.message)}")
    raise typer.Exit(EXIT_CODES.get(exc.code, 1)) from exc
