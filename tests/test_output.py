from rich.text import Text

from dfops.cli.common import output
from dfops.cli.common.output import Out, state_style


def test_kv_prints_markup_like_values_literally(capsys):
    Out().kv({"filter": "[/x]", "state": Text("JOB_STATE_RUNNING", style="warn")})

    printed = capsys.readouterr().out
    assert "filter: [/x]" in printed
    assert "state: JOB_STATE_RUNNING" in printed


def test_state_style_groups_states():
    assert state_style("JOB_STATE_RUNNING") == "warn"
    assert state_style("JOB_STATE_FAILED") == "err"
    assert state_style("JOB_STATE_DONE") == "ok"
    assert state_style(None) == "meta"


def test_confirm_retries_without_auto_enter_on_old_questionary(monkeypatch):
    calls: list[dict] = []

    class _Prompt:
        def ask(self):
            return True

    def _confirm(message, **kwargs):
        calls.append(kwargs)
        if "auto_enter" in kwargs:
            raise TypeError("unexpected keyword argument 'auto_enter'")
        return _Prompt()

    monkeypatch.setattr(output.questionary, "confirm", _confirm)

    assert Out().confirm("Stop job?") is True
    assert len(calls) == 2
    assert "auto_enter" not in calls[1]
    assert "pointer" not in calls[0]
