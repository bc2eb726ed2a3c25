"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from dfops.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)

_RUNNING_STATES = {
    "JOB_STATE_RUNNING",
    "JOB_STATE_PENDING",
    "JOB_STATE_QUEUED",
    "JOB_STATE_DRAINING",
    "JOB_STATE_CANCELLING",
}
_FAILED_STATES = {"JOB_STATE_FAILED", "JOB_STATE_CANCELLED"}


def state_style(state: str | None) -> str:
    """Return the theme style used to render a Dataflow job state."""
    if not state:
        return "meta"
    if state in _FAILED_STATES:
        return "err"
    if state in _RUNNING_STATES:
        return "warn"
    if state.startswith("JOB_STATE_") and state != "JOB_STATE_UNKNOWN":
        return "ok"
    return "meta"


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("auto_enter",):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {escape(msg)}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {escape(msg)}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {escape(msg)}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        err_console.print(f"[err]✗[/] {escape(msg)}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs; values are literal unless given as rich Text."""
        for k, v in items.items():
            line = Text.assemble((str(k), "meta"), ": ")
            line.append_text(v if isinstance(v, Text) else Text(str(v)))
            console.print(line)

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            f"[dfops] {message}",
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def job_record(self, record: Any) -> None:
        """
        Print one stored job: name, id, project, state and its declared config.

        Expects an object with .config, .id and .state
        (like dfops.core.resource.ResourceRecord).
        """
        config = record.config
        items: dict[str, Any] = {
            "name": config.name,
            "id": record.id or "-",
            "project": config.project or "(default)",
            "state": Text(record.state or "-", style=state_style(record.state)),
            "template_gcs_path": config.template_gcs_path,
            "on_delete": config.on_delete.value,
        }
        if config.environment is not None:
            items["environment"] = ", ".join(
                f"{k}={v}" for k, v in config.environment.to_api().items()
            )
        if config.parameters:
            items["parameters"] = ", ".join(
                f"{k}={v}" for k, v in sorted(config.parameters.items())
            )
        self.kv(items)

    def records_table(
        self, records: Iterable[Any], title: str = "Dataflow jobs"
    ) -> None:
        """
        Expects objects with .config, .id and .state
        (like dfops.core.resource.ResourceRecord)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Job ID", no_wrap=True)
        t.add_column("Project", style="meta")
        t.add_column("State")
        t.add_column("On delete", style="meta")

        for r in records:
            t.add_row(
                r.config.name,
                str(r.id or "-"),
                r.config.project or "(default)",
                Text(r.state or "-", style=state_style(r.state)),
                r.config.on_delete.value,
            )

        console.print(t)


out = Out()
