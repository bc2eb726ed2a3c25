"""Common CLI options for the CLI."""

import typer

from dfops.core.jobs import DEFAULT_ON_DELETE

ProjectOpt = typer.Option(
    None,
    "--project",
    "-p",
    help="Default Google Cloud project (overrides DFOPS_PROJECT and ADC)",
)

StateFileOpt = typer.Option(
    None,
    "--state-file",
    help="Path of the job state file (default: $DFOPS_STATE_DIR/jobs.json)",
    dir_okay=False,
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log Dataflow API calls",
)

JobNameOpt = typer.Option(
    ...,
    "--name",
    help="Dataflow job name (lowercase letters, digits and dashes)",
)

JobProjectOpt = typer.Option(
    None,
    "--job-project",
    help="Project to run this job in (stored with the job)",
)

TemplateGcsPathOpt = typer.Option(
    ...,
    "--template-gcs-path",
    help="Cloud Storage path of the job template (gs://...)",
)

TempLocationOpt = typer.Option(
    None,
    "--temp-location",
    help="Cloud Storage path for temporary files",
)

ZoneOpt = typer.Option(
    None,
    "--zone",
    help="Compute Engine zone for the workers",
)

MaxWorkersOpt = typer.Option(
    None,
    "--max-workers",
    min=1,
    help="Maximum number of workers",
)

ParamOpt = typer.Option(
    [],
    "--param",
    help="Template parameter (key=value). This is reusable.",
    show_default=False,
)

OnDeleteOpt = typer.Option(
    DEFAULT_ON_DELETE,
    "--on-delete",
    case_sensitive=False,
    help="What to do with the job when it is deleted",
)

ReplaceOpt = typer.Option(
    False,
    "--replace",
    help="Delete and recreate the job if its configuration changed",
)

ConfirmOpt = typer.Option(
    True,
    "--confirm/--no-confirm",
    help="Ask for confirmation before stopping the job",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show what would be sent, but don't call Dataflow",
)

