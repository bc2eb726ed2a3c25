"""Exit handling utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, NoReturn

import typer
from googleapiclient.errors import HttpError

from dfops.cli.common.output import out
from dfops.core.auth import AuthError
from dfops.core.jobs import ProjectResolutionError
from dfops.core.state import StateError

# Failures that end a command with a red error line instead of a traceback.
HANDLED_ERRORS = (AuthError, HttpError, ProjectResolutionError, StateError)


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """
    Helper function to print an error message and exit with a given code.

    Exists to satisfy pylint W0707 and to standardize error exits.
    """
    out.error(message)
    raise typer.Exit(code) from exc


def _describe(exc: Exception) -> str:
    """Return a one-line description of a handled error."""
    if isinstance(exc, HttpError):
        status = getattr(exc.resp, "status", "?")
        reason = getattr(exc, "reason", None) or str(exc)
        return f"Dataflow API error {status}: {reason}"
    return str(exc)


@contextmanager
def handle_errors(action: str) -> Iterator[None]:
    """Turn expected remote/auth/state failures into a clean CLI exit."""
    try:
        yield
    except HANDLED_ERRORS as exc:
        exit_from_exc(exc, message=f"{action} failed: {_describe(exc)}")
