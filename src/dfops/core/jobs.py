"""Core Dataflow job domain models and deletion policy mapping.

This module defines the typed job configuration (JobConfig,
RuntimeEnvironment), the deletion policy enum and its mapping onto Dataflow
requested states, and the client interface the resource adapter talks to.
It is intentionally free of CLI and googleapiclient concerns so that the
same models can be driven from the CLI, automation or tests.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Protocol

DATAFLOW_JOB_NAME_RE = re.compile(r"^[a-z]([-a-z0-9]*[a-z0-9])?$")


class JobState(str, Enum):
    """
    Dataflow job lifecycle states as reported by the API.

    Reference: https://cloud.google.com/dataflow/docs/reference/rest/v1b3/projects.jobs#Job.JobState
    """

    UNKNOWN = "JOB_STATE_UNKNOWN"
    STOPPED = "JOB_STATE_STOPPED"
    RUNNING = "JOB_STATE_RUNNING"
    DONE = "JOB_STATE_DONE"
    FAILED = "JOB_STATE_FAILED"
    CANCELLED = "JOB_STATE_CANCELLED"
    UPDATED = "JOB_STATE_UPDATED"
    DRAINING = "JOB_STATE_DRAINING"
    DRAINED = "JOB_STATE_DRAINED"
    PENDING = "JOB_STATE_PENDING"
    CANCELLING = "JOB_STATE_CANCELLING"
    QUEUED = "JOB_STATE_QUEUED"


class OnDeletePolicy(str, Enum):
    """
    What to ask Dataflow to do with a job when its resource is deleted.

    Values:
        CANCEL: Stop the job immediately, dropping in-flight data.
        DRAIN: Stop ingesting and let in-flight data finish processing.
    """

    CANCEL = "cancel"
    DRAIN = "drain"


DEFAULT_ON_DELETE = OnDeletePolicy.DRAIN

# "done" has no OnDeletePolicy member and can never be declared.
_REQUESTED_STATE_BY_POLICY: dict[str, JobState] = {
    "cancel": JobState.CANCELLED,
    "done": JobState.DONE,
    "drain": JobState.DRAINING,
}


class InvalidOnDeletePolicy(ValueError):
    """Raised when an on_delete value has no requested-state mapping."""


class JobNotFound(LookupError):
    """Raised when Dataflow reports that a job does not exist."""

    def __init__(self, project: str, job_id: str):
        super().__init__(f"Dataflow job {job_id} not found in project {project}")
        self.project = project
        self.job_id = job_id


class ProjectResolutionError(RuntimeError):
    """Raised when no explicit or default project is available."""


def map_on_delete(policy: str) -> str:
    """
    Translate an on_delete policy into a Dataflow requested state.

    Args:
        policy: Deletion policy string (for example "cancel" or "drain").

    Returns:
        The requested state string to send to the Jobs API.

    Raises:
        InvalidOnDeletePolicy: If the policy is not recognized.
    """
    key = policy.value if isinstance(policy, OnDeletePolicy) else policy
    try:
        return _REQUESTED_STATE_BY_POLICY[key].value
    except (KeyError, TypeError):
        raise InvalidOnDeletePolicy(f"Invalid `on_delete` policy: {policy}") from None


def parse_on_delete(value: str | OnDeletePolicy | None) -> OnDeletePolicy:
    """Return the declared policy, defaulting to drain when unset."""
    if value is None:
        return DEFAULT_ON_DELETE
    if isinstance(value, OnDeletePolicy):
        return value
    try:
        return OnDeletePolicy(value)
    except ValueError:
        allowed = ", ".join(p.value for p in OnDeletePolicy)
        raise InvalidOnDeletePolicy(
            f"Invalid `on_delete` policy: {value} (expected one of: {allowed})"
        ) from None


def validate_job_name(name: str) -> str:
    """Raise ValueError if `name` is not a valid Dataflow job name."""
    if not isinstance(name, str) or not DATAFLOW_JOB_NAME_RE.fullmatch(name):
        raise ValueError(
            f"Invalid Dataflow job name {name!r}: must match "
            f"{DATAFLOW_JOB_NAME_RE.pattern}"
        )
    return name


@dataclass(frozen=True)
class RuntimeEnvironment:
    """
    Runtime environment for a templated Dataflow job.

    Attributes:
        temp_location: Cloud Storage path for temporary files.
        zone: Compute Engine zone the workers run in.
        max_workers: Optional cap on the number of workers.
    """

    temp_location: str
    zone: str
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if not self.temp_location:
            raise ValueError("environment.temp_location is required")
        if not self.zone:
            raise ValueError("environment.zone is required")
        if self.max_workers is not None:
            if isinstance(self.max_workers, bool) or not isinstance(
                self.max_workers, int
            ):
                raise ValueError("environment.max_workers must be an integer")
            if self.max_workers < 1:
                raise ValueError("environment.max_workers must be >= 1")

    def to_api(self) -> dict[str, Any]:
        """Return the RuntimeEnvironment body expected by the Dataflow API."""
        body: dict[str, Any] = {
            "tempLocation": self.temp_location,
            "zone": self.zone,
        }
        if self.max_workers is not None:
            body["maxWorkers"] = int(self.max_workers)
        return body


@dataclass(frozen=True)
class JobConfig:
    """
    Declared configuration of a Dataflow template job.

    Every field is write-once: changing any of them means the job has to be
    replaced (see requires_replacement).
    """

    name: str
    template_gcs_path: str
    project: str | None = None
    environment: RuntimeEnvironment | None = None
    parameters: Mapping[str, str] = field(default_factory=dict)
    on_delete: OnDeletePolicy = DEFAULT_ON_DELETE

    def __post_init__(self) -> None:
        validate_job_name(self.name)
        if not self.template_gcs_path:
            raise ValueError("template_gcs_path is required")
        for key, value in (self.parameters or {}).items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValueError(
                    f"Parameter {key!r} must map a string to a string, got {value!r}"
                )
        object.__setattr__(self, "parameters", dict(self.parameters or {}))
        object.__setattr__(self, "on_delete", parse_on_delete(self.on_delete))

    def to_template_request(self) -> dict[str, Any]:
        """Return the CreateJobFromTemplateRequest body for this job."""
        body: dict[str, Any] = {
            "jobName": self.name,
            "gcsPath": self.template_gcs_path,
            "parameters": dict(self.parameters),
        }
        if self.environment is not None:
            body["environment"] = self.environment.to_api()
        return body

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible data."""
        env = None
        if self.environment is not None:
            env = {
                "temp_location": self.environment.temp_location,
                "zone": self.environment.zone,
                "max_workers": self.environment.max_workers,
            }
        return {
            "name": self.name,
            "project": self.project,
            "template_gcs_path": self.template_gcs_path,
            "environment": env,
            "parameters": dict(self.parameters),
            "on_delete": self.on_delete.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JobConfig:
        """Build a JobConfig from data produced by to_dict."""
        env = data.get("environment")
        return cls(
            name=data["name"],
            project=data.get("project"),
            template_gcs_path=data["template_gcs_path"],
            environment=RuntimeEnvironment(**env) if env else None,
            parameters=data.get("parameters") or {},
            on_delete=data.get("on_delete") or DEFAULT_ON_DELETE,
        )


def requires_replacement(old: JobConfig, new: JobConfig) -> bool:
    """Return True if moving from `old` to `new` needs a new remote job."""
    return old != new


class DataflowJobsClient(Protocol):
    """Interface for the Dataflow Jobs API calls used by the resource."""

    def create_job_from_template(
        self, project: str, request: Mapping[str, Any]
    ) -> str:
        """Launch a job from a template and return its remote id."""
        ...

    def get_job_state(self, project: str, job_id: str) -> str:
        """Return the job's current state; raise JobNotFound if it is gone."""
        ...

    def request_job_state(
        self, project: str, job_id: str, requested_state: str
    ) -> None:
        """Ask Dataflow to move the job to `requested_state`."""
        ...
