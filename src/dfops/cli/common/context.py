"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dfops.core.adapters.dataflowjobs import DataflowJobsAdapter
from dfops.core.auth import default_project, get_client, load_credentials
from dfops.core.resource import DataflowJobResource
from dfops.core.state import ResourceStore, default_state_path


@dataclass
class JobsAppContext:
    """
    Application context holding the state store and, once needed, the
    Dataflow client and job resource.

    Credentials are only loaded the first time a command needs the remote
    API, so validation errors and `list` never touch Google Cloud.
    """

    project: str | None
    store: ResourceStore
    resource: DataflowJobResource | None = None
    _credentials: Any = field(default=None, repr=False)
    _adc_project: str | None = field(default=None, repr=False)
    _credentials_loaded: bool = field(default=False, repr=False)

    def _load_credentials(self) -> None:
        if not self._credentials_loaded:
            self._credentials, self._adc_project = load_credentials()
            self._credentials_loaded = True

    def default_project(self) -> str | None:
        """Return --project / DFOPS_PROJECT, falling back to the ADC project."""
        project = default_project(self.project)
        if project:
            return project
        self._load_credentials()
        return default_project(self.project, self._adc_project)

    def get_resource(self) -> DataflowJobResource:
        """Return the job resource, building the Dataflow client on first use."""
        if self.resource is None:
            self._load_credentials()
            adapter = DataflowJobsAdapter(get_client(self._credentials))
            self.resource = DataflowJobResource(adapter, self.default_project)
        return self.resource


def build_jobs_context(
    project: str | None, state_file: Path | None = None
) -> JobsAppContext:
    """Build and return the application context for job commands.

    Args:
        project: Optional default Google Cloud project.
        state_file: Optional path of the state file to use.

    Returns:
        JobsAppContext: Context with the state store; the client is built lazily.
    """
    store = ResourceStore(state_file or default_state_path())
    return JobsAppContext(project=project, store=store)
