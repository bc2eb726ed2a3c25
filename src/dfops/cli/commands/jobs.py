"""Commands for managing templated Dataflow jobs."""

from pathlib import Path

import typer

from dfops.cli.common.context import JobsAppContext, build_jobs_context
from dfops.cli.common.exits import die, handle_errors, ok_exit, warn_exit
from dfops.cli.common.options import (
    ConfirmOpt,
    DryRunOpt,
    JobNameOpt,
    JobProjectOpt,
    MaxWorkersOpt,
    OnDeleteOpt,
    ParamOpt,
    ProjectOpt,
    ReplaceOpt,
    StateFileOpt,
    TempLocationOpt,
    TemplateGcsPathOpt,
    ZoneOpt,
)
from dfops.cli.common.output import out
from dfops.cli.common.params import parse_parameters
from dfops.core.jobs import (
    JobConfig,
    OnDeletePolicy,
    RuntimeEnvironment,
    map_on_delete,
    requires_replacement,
)
from dfops.core.resource import ResourceRecord

app = typer.Typer(
    help="Create, refresh and stop templated Dataflow jobs",
    no_args_is_help=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    project: str | None = ProjectOpt,
    state_file: Path | None = StateFileOpt,
):
    """Initialize jobs context (state store; Dataflow client on demand)."""
    ctx.obj = build_jobs_context(project, state_file)


def _build_environment(
    temp_location: str | None,
    zone: str | None,
    max_workers: int | None,
) -> RuntimeEnvironment | None:
    """Return the runtime environment block, or None if none was given."""
    if temp_location is None and zone is None and max_workers is None:
        return None
    if not temp_location or not zone:
        raise ValueError(
            "--temp-location and --zone are both required when an environment "
            "is given"
        )
    return RuntimeEnvironment(
        temp_location=temp_location,
        zone=zone,
        max_workers=max_workers,
    )


def _load_record(appctx: JobsAppContext, name: str) -> ResourceRecord:
    with handle_errors("Loading state"):
        record = appctx.store.get(name)
    if record is None:
        die(f"No Dataflow job named '{name}' in {appctx.store.path}", code=1)
    return record


@app.command()
def create(
    ctx: typer.Context,
    name: str = JobNameOpt,
    template_gcs_path: str = TemplateGcsPathOpt,
    job_project: str | None = JobProjectOpt,
    temp_location: str | None = TempLocationOpt,
    zone: str | None = ZoneOpt,
    max_workers: int | None = MaxWorkersOpt,
    param: list[str] = ParamOpt,
    on_delete: OnDeletePolicy = OnDeleteOpt,
    replace: bool = ReplaceOpt,
    dry_run: bool = DryRunOpt,
):
    """
    Launch a Dataflow job from a classic template.
    """
    appctx: JobsAppContext = ctx.obj

    try:
        config = JobConfig(
            name=name,
            project=job_project,
            template_gcs_path=template_gcs_path,
            environment=_build_environment(temp_location, zone, max_workers),
            parameters=parse_parameters(param),
            on_delete=on_delete,
        )
    except ValueError as e:
        die(str(e), code=1)

    with handle_errors("Loading state"):
        existing = appctx.store.get(config.name)

    if existing is not None and existing.exists:
        if not requires_replacement(existing.config, config):
            ok_exit(f"Job '{config.name}' already exists (id: {existing.id})")
        if not replace:
            die(
                f"Job '{config.name}' exists with a different configuration. "
                "Every setting forces a new job; re-run with --replace.",
                code=1,
            )

    if dry_run:
        out.header("Template request")
        out.kv(config.to_template_request())
        if existing is not None and existing.exists:
            out.warn(
                f"Job {existing.id} would be stopped "
                f"({map_on_delete(existing.config.on_delete.value)})"
            )
        warn_exit("Dry-run enabled: no job was created", code=0)

    with handle_errors("Creating Dataflow job"):
        resource = appctx.get_resource()

        if existing is not None and existing.exists:
            with out.status(f"Stopping previous job {existing.id}..."):
                requested = resource.delete(existing)
            appctx.store.remove(existing.key)
            out.warn(f"Requested {requested} for previous job {existing.id}")

        record = ResourceRecord(config=config)
        try:
            with out.status("Creating Dataflow job..."):
                resource.create(record)
        finally:
            if record.exists:
                appctx.store.put(record)

    if not record.exists:
        warn_exit(
            f"Job '{config.name}' was created but Dataflow no longer reports it; "
            "nothing stored",
            code=1,
        )

    out.success(f"Dataflow job created: {record.id}")
    out.job_record(record)


@app.command()
def read(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of a job created with dfops"),
):
    """
    Refresh the stored state of a job from Dataflow.
    """
    appctx: JobsAppContext = ctx.obj
    record = _load_record(appctx, name)

    with handle_errors("Reading Dataflow job"):
        resource = appctx.get_resource()
        with out.status("Reading job..."):
            exists = resource.read(record)

        if not exists:
            appctx.store.remove(name)
            warn_exit(
                f"Job '{name}' no longer exists in Dataflow; removed from state",
                code=0,
            )

        appctx.store.put(record)

    out.job_record(record)


@app.command()
def delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of a job created with dfops"),
    confirm: bool = ConfirmOpt,
    dry_run: bool = DryRunOpt,
):
    """
    Stop a job according to its on_delete policy (cancel or drain).
    """
    appctx: JobsAppContext = ctx.obj
    record = _load_record(appctx, name)

    try:
        requested_state = map_on_delete(record.config.on_delete.value)
    except ValueError as e:
        die(str(e), code=1)

    out.header("Job to stop")
    out.job_record(record)

    if dry_run:
        warn_exit(f"Dry-run enabled: {requested_state} was not requested", code=0)

    if confirm and not out.confirm(f"Request {requested_state} for job {record.id}?"):
        ok_exit("Cancelled")

    with handle_errors("Deleting Dataflow job"):
        resource = appctx.get_resource()
        with out.status(f"Requesting {requested_state}..."):
            resource.delete(record)
        appctx.store.remove(name)

    out.success(f"Requested {requested_state} for job {record.id}")


@app.command("list")
def list_jobs(ctx: typer.Context):
    """
    List jobs tracked in the state file.
    """
    appctx: JobsAppContext = ctx.obj

    with handle_errors("Loading state"):
        records = list(appctx.store.load().values())

    if not records:
        warn_exit("No jobs tracked", code=0)

    out.records_table(records)
