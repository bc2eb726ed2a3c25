"""Create / read / delete lifecycle of a templated Dataflow job.

DataflowJobResource is stateless: everything it knows about a job lives on
the ResourceRecord passed in, and each operation issues exactly one remote
call (create is followed by a read). There is no polling, no retry and no
cleanup after partial failure; remote errors reach the caller as raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from dfops.core.jobs import (
    DataflowJobsClient,
    JobConfig,
    JobNotFound,
    ProjectResolutionError,
    map_on_delete,
)

log = logging.getLogger(__name__)

ProjectResolver = Callable[[], "str | None"]


@dataclass
class ResourceRecord:
    """
    Stored state of one declared Dataflow job.

    Attributes:
        config: Declared configuration the job was created from.
        id: Remote job id; None until created or after the job disappeared.
        state: Last observed remote state; None until read.
    """

    config: JobConfig
    id: str | None = None
    state: str | None = None

    @property
    def key(self) -> str:
        return self.config.name

    @property
    def exists(self) -> bool:
        return self.id is not None


def resolve_project(config: JobConfig, default_project: ProjectResolver) -> str:
    """
    Return the effective project for a job.

    The declared project wins; otherwise the ambient default is used.

    Raises:
        ProjectResolutionError: If neither is available.
    """
    if config.project:
        return config.project
    project = default_project()
    if not project:
        raise ProjectResolutionError(
            f"No project set for Dataflow job {config.name!r} and no default "
            "project could be determined (use --project or DFOPS_PROJECT)."
        )
    return project


class DataflowJobResource:
    """Translate declared job records into Dataflow Jobs API calls."""

    def __init__(self, client: DataflowJobsClient, default_project: ProjectResolver):
        self.client = client
        self.default_project = default_project

    def create(self, record: ResourceRecord) -> str:
        """
        Launch the job described by `record.config` and refresh its state.

        Returns:
            The remote job id, which is also stored on the record.
        """
        config = record.config
        project = resolve_project(config, self.default_project)
        request = config.to_template_request()

        log.debug(
            "Creating Dataflow job %s in %s from %s",
            config.name,
            project,
            config.template_gcs_path,
        )
        job_id = self.client.create_job_from_template(project, request)
        record.id = job_id
        log.info("Created Dataflow job %s with id %s", config.name, job_id)

        self.read(record)
        return job_id

    def read(self, record: ResourceRecord) -> bool:
        """
        Refresh `record.state` from Dataflow.

        Returns:
            True if the job still exists. False if Dataflow no longer knows
            the job, in which case the record id is cleared so the caller
            drops it from tracked state.
        """
        if record.id is None:
            raise ValueError(f"Dataflow job {record.key!r} has no id to read")

        project = resolve_project(record.config, self.default_project)
        try:
            record.state = self.client.get_job_state(project, record.id)
        except JobNotFound:
            log.warning(
                "Dataflow job %s (%s) not found, removing from state",
                record.key,
                record.id,
            )
            record.id = None
            record.state = None
            return False
        return True

    def delete(self, record: ResourceRecord) -> str:
        """
        Request the job transition selected by its on_delete policy.

        The call only requests the transition; Dataflow completes it on its
        own schedule.

        Returns:
            The requested state that was sent.
        """
        requested_state = map_on_delete(record.config.on_delete.value)
        if record.id is None:
            raise ValueError(f"Dataflow job {record.key!r} has no id to delete")

        project = resolve_project(record.config, self.default_project)
        log.debug("Requesting %s for Dataflow job %s", requested_state, record.id)
        self.client.request_job_state(project, record.id, requested_state)
        return requested_state
