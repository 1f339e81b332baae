"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from gplay.core.errors import ErrorCode, PlayError
from gplay.core.result import Err, Result

if TYPE_CHECKING:
    from gplay.output.console import ConsoleProtocol


def exit_on_error[T](
    result: Result[T, PlayError],
    console: ConsoleProtocol,
    error_code: ErrorCode = ErrorCode.FAILURE,
) -> None:
    """Print ``error: <message>`` (and its hint) and exit if result is Err."""
    if isinstance(result, Err):
        console.error(result.error.message)
        if result.error.hint:
            console.hint(result.error.hint)
        raise typer.Exit(code=int(error_code))
