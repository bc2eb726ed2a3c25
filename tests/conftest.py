from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from dfops.core.jobs import JobNotFound  # noqa: E402


class StubJobsClient:
    """In-memory stand-in for DataflowJobsAdapter that records every call."""

    def __init__(self, job_id: str = "2024-job-1", state: str = "JOB_STATE_RUNNING"):
        self.job_id = job_id
        self.state = state
        self.missing: set[str] = set()
        self.calls: list[tuple] = []

    def create_job_from_template(self, project, request):
        self.calls.append(("create", project, dict(request)))
        return self.job_id

    def get_job_state(self, project, job_id):
        self.calls.append(("get", project, job_id))
        if job_id in self.missing:
            raise JobNotFound(project, job_id)
        return self.state

    def request_job_state(self, project, job_id, requested_state):
        self.calls.append(("update", project, job_id, requested_state))


@pytest.fixture
def stub_client() -> StubJobsClient:
    return StubJobsClient()
