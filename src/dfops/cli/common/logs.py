"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from dfops.cli.common.output import err_console


def configure_logging(verbose: bool = False) -> None:
    """Route dfops and googleapiclient logs through Rich on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=err_console,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    logging.getLogger("dfops").setLevel(level)
    # googleapiclient logs every request URL at INFO
    logging.getLogger("googleapiclient").setLevel(
        logging.INFO if verbose else logging.WARNING
    )
