"""Authentication helpers for Google Cloud Dataflow.

This module centralizes resolution of Application Default Credentials and
the default project, and builds the `dataflow` v1b3 discovery client used
by the jobs adapter.
"""

from __future__ import annotations

import os
from typing import Any

import google.auth
from google.auth.exceptions import DefaultCredentialsError
from googleapiclient.discovery import Resource, build

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
PROJECT_ENV = "DFOPS_PROJECT"


class AuthError(RuntimeError):
    """Raised when Google Cloud authentication fails."""


def _format_auth_error(message: str) -> str:
    """Return a user-friendly auth error message."""
    return (
        f"Google Cloud authentication failed: {message}\n"
        "Set up Application Default Credentials with:\n"
        "  $ gcloud auth application-default login"
    )


def _clean_project(project: str | None) -> str | None:
    """Strip whitespace and turn empty strings into None."""
    if project is None:
        return None
    project = project.strip()
    return project or None


def load_credentials() -> tuple[Any, str | None]:
    """
    Return (credentials, project) from Application Default Credentials.

    The project is whatever ADC reports (GOOGLE_CLOUD_PROJECT, the gcloud
    config or the service account key) and may be None.
    """
    try:
        credentials, project = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
    except DefaultCredentialsError as exc:
        raise AuthError(_format_auth_error(str(exc))) from exc
    return credentials, _clean_project(project)


def default_project(
    explicit: str | None = None, adc_project: str | None = None
) -> str | None:
    """
    Return the ambient default project.

    Precedence: the explicit value (e.g. --project), then DFOPS_PROJECT,
    then the project reported by Application Default Credentials.
    """
    return (
        _clean_project(explicit)
        or _clean_project(os.getenv(PROJECT_ENV))
        or _clean_project(adc_project)
    )


def get_client(credentials: Any) -> Resource:
    """Create and return a `dataflow` v1b3 discovery client."""
    return build("dataflow", "v1b3", credentials=credentials, cache_discovery=False)
