from __future__ import annotations

import logging
from typing import Any, Mapping

from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from dfops.core.jobs import JobNotFound, JobState

log = logging.getLogger(__name__)


class DataflowJobsAdapter:
    """Adapter around the Dataflow v1b3 discovery client (templates/jobs)."""

    def __init__(self, service: Resource):
        """Create a jobs adapter for a built `dataflow` v1b3 service."""
        self.service = service

    def create_job_from_template(
        self, project: str, request: Mapping[str, Any]
    ) -> str:
        """Launch a job from a classic template and return its remote id."""
        job = (
            self.service.projects()
            .templates()
            .create(projectId=project, body=dict(request))
            .execute()
        )
        log.debug("templates.create response: %s", job)
        return job["id"]

    def get_job(self, project: str, job_id: str) -> dict[str, Any]:
        """Return the Job resource; raise JobNotFound on HTTP 404."""
        try:
            return (
                self.service.projects()
                .jobs()
                .get(projectId=project, jobId=job_id)
                .execute()
            )
        except HttpError as exc:
            if _is_not_found(exc):
                raise JobNotFound(project, job_id) from exc
            raise

    def get_job_state(self, project: str, job_id: str) -> str:
        """Return the job's currentState string."""
        job = self.get_job(project, job_id)
        # Freshly created jobs may not report a state yet
        return job.get("currentState") or JobState.UNKNOWN.value

    def request_job_state(
        self, project: str, job_id: str, requested_state: str
    ) -> None:
        """Ask Dataflow to transition the job into `requested_state`."""
        (
            self.service.projects()
            .jobs()
            .update(
                projectId=project,
                jobId=job_id,
                body={"requestedState": requested_state},
            )
            .execute()
        )


def _is_not_found(exc: HttpError) -> bool:
    """Return True if the HttpError carries a 404 status."""
    status = getattr(getattr(exc, "resp", None), "status", None)
    try:
        return int(status) == 404
    except (TypeError, ValueError):
        return False
