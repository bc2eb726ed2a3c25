"""Persistent resource records for declared Dataflow jobs.

The store is a single JSON file keyed by job name. It holds the declared
configuration, the remote id and the last observed state of every job the
tool manages, so that later read/delete invocations can find them again.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from dfops.core.jobs import JobConfig
from dfops.core.resource import ResourceRecord

log = logging.getLogger(__name__)

_STATE_DIR_ENV = "DFOPS_STATE_DIR"
_STATE_VERSION = 1


class StateError(RuntimeError):
    """Raised when the state file cannot be read."""


def default_state_path() -> Path:
    """Return the state file path, honoring DFOPS_STATE_DIR and XDG_STATE_HOME."""
    state_root = os.getenv(_STATE_DIR_ENV)
    if state_root:
        base = Path(state_root)
    else:
        xdg = os.getenv("XDG_STATE_HOME")
        base = (Path(xdg) if xdg else Path.home() / ".local" / "state") / "dfops"
    return base / "jobs.json"


class ResourceStore:
    """JSON-file backed collection of ResourceRecord objects."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> dict[str, ResourceRecord]:
        """Return all stored records keyed by job name."""
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            raise StateError(f"Could not read state file {self.path}: {exc}") from exc

        records: dict[str, ResourceRecord] = {}
        for item in payload.get("resources", []):
            try:
                record = ResourceRecord(
                    config=JobConfig.from_dict(item["config"]),
                    id=item.get("id"),
                    state=item.get("state"),
                )
            except (KeyError, TypeError, ValueError) as exc:
                log.warning("Skipping unreadable state entry %r: %s", item, exc)
                continue
            records[record.key] = record
        return records

    def get(self, name: str) -> ResourceRecord | None:
        return self.load().get(name)

    def save(self, records: dict[str, ResourceRecord]) -> None:
        """Persist `records`, replacing the previous contents."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": _STATE_VERSION,
            "resources": [
                {"config": r.config.to_dict(), "id": r.id, "state": r.state}
                for r in sorted(records.values(), key=lambda r: r.key)
            ],
        }
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(payload, indent=2))
        tmp.replace(self.path)

    def put(self, record: ResourceRecord) -> None:
        """Insert or update a record, dropping it if it no longer exists."""
        records = self.load()
        if record.exists:
            records[record.key] = record
        else:
            records.pop(record.key, None)
        self.save(records)

    def remove(self, name: str) -> None:
        records = self.load()
        if records.pop(name, None) is not None:
            self.save(records)
