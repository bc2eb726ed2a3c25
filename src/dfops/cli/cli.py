"""CLI application for Dataflow job tooling."""

import typer

from dfops.cli.commands.jobs import app as jobs_app
from dfops.cli.common.logs import configure_logging
from dfops.cli.common.options import VerboseOpt

app = typer.Typer(
    help="dfops - declarative Dataflow template jobs",
    no_args_is_help=True,
)


@app.callback()
def _main(verbose: bool = VerboseOpt):
    """Configure logging for all commands."""
    configure_logging(verbose)


app.add_typer(jobs_app, name="jobs", help="Create / read / delete Dataflow jobs.")


if __name__ == "__main__":
    app()
