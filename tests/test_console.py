# tests/test_console.py

from __future__ import annotations

from task_tracker.cli import commands
from task_tracker.cli.bootstrap import create_initial_state
from task_tracker.connectors.console_connector import handle_line, run_console_loop
from task_tracker.tasks.task_store import TaskRepository


def _scripted(lines: list[str]):
    it = iter(lines)

    def read(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read


def test_create_initial_state_prepares_storage(settings) -> None:
    settings.storage_path = settings.storage_path.parent / "nested" / "tasks.json"
    settings.metadata_path = settings.storage_path.with_name("metadata.json")

    state = create_initial_state(settings=settings)

    assert isinstance(state.repository, TaskRepository)
    assert state.settings is settings
    assert settings.storage_path.exists()
    assert settings.metadata_path.exists()
    assert state.repository.load() == []


def test_handle_line_treats_plain_text_as_search(state) -> None:
    handle_line(state, "/add Buy milk")

    assert handle_line(state, "   ") is None
    assert "Buy milk" in (handle_line(state, "milk") or "")
    assert handle_line(state, "eggs") == "No tasks match 'eggs'."


def test_handle_line_reports_handler_crash(state, monkeypatch, caplog) -> None:
    def boom(state, args):
        raise RuntimeError("kaboom")

    monkeypatch.setitem(commands.registry._handlers, "stats", boom)

    assert handle_line(state, "/stats") == "Internal error while handling a command."
    assert "Command handler crashed." in caplog.text


def test_console_loop_runs_until_exit(state) -> None:
    out: list[str] = []

    run_console_loop(
        state,
        read=_scripted(["/add Water plants", "/list", "", "/exit", "/list"]),
        write=out.append,
    )

    text = "\n".join(out)
    assert "task-tracker-test" in out[0]
    assert "Task storage" in out[1]
    assert "Task saved: Water plants" in text
    assert "[1] Water plants - pending" in text
    assert out[-1] == "Goodbye!"
    assert len(state.repository.load()) == 1


def test_console_loop_stops_on_eof(state) -> None:
    out: list[str] = []

    run_console_loop(state, read=_scripted([]), write=out.append)

    assert out[-1] == "Goodbye!"
