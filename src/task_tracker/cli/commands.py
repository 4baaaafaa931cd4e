# src/task_tracker/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.queries import (
    MENU_FILTERS,
    compute_stats,
    filter_by_menu_option,
    filter_by_title_substring,
    filter_overdue,
    filter_priority,
    filter_related_by_category,
    sort_by_title,
    visible_tasks,
)
from ..tasks.task_api import FIELD_ALIASES, create_task, delete_task, edit_task, resolve_task
from ..tasks.task_models import PRIORITY_WINDOW_DAYS, Task
from . import render

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

LIST_MENU = "1=all, 2=pending, 3=in progress, 4=completed"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            # Unbalanced quotes: fall back to whitespace splitting.
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        logger.debug("Command /%s args=%s", name, args)
        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def split_field_args(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate `field=value` tokens (known fields only) from plain words."""
    words: list[str] = []
    fields: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key.lower() in FIELD_ALIASES:
            fields[key.lower()] = value
        else:
            words.append(arg)
    return words, fields


def _visible(state: AppState) -> list[Task]:
    return visible_tasks(state.repository.load())


def _show_listing(state: AppState, tasks: list[Task], heading: str) -> str:
    listing = sort_by_title(tasks)
    state.last_listing = listing
    return render.format_task_list(listing, heading)


def _find_task(state: AppState, ref: str) -> Task | None:
    """Resolve against the last listing first, then against all visible tasks."""
    visible = _visible(state)
    picked = None
    if state.last_listing:
        picked = resolve_task(state.last_listing, ref)
    if picked is None:
        picked = resolve_task(sort_by_title(visible), ref)
    if picked is None:
        return None
    # The listing may be stale; hand back the stored version.
    return next((t for t in visible if t.id == picked.id), None)


def _window_days(state: AppState) -> int:
    return int(getattr(state.settings, "priority_window_days", PRIORITY_WINDOW_DAYS))


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help() + "\n\nField codes:\n" + render.format_all_options()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list      -> all visible tasks
    /list 2    -> pending (1=all, 2=pending, 3=in progress, 4=completed)
    """
    code = 1
    if args:
        if not args[0].isdecimal():
            return f"Usage: /list [code]  ({LIST_MENU})"
        code = int(args[0])

    tasks = filter_by_menu_option(_visible(state), code)
    if not tasks and code not in MENU_FILTERS:
        return f"Unknown list option {code}. Options: {LIST_MENU}."
    return _show_listing(state, tasks, f"Tasks (option {code})")


def cmd_search(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /search <part of a title>"
    term = " ".join(args)
    found = filter_by_title_substring(_visible(state), term)
    if not found:
        return f"No tasks match '{term}'."
    return _show_listing(state, found, f"Results for '{term}'")


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <number|id>"
    task = _find_task(state, args[0])
    if task is None:
        return f"Task not found: {args[0]}"
    return render.format_task_details(task)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [desc="..."] [status=N] [difficulty=N] [category=N] [due=YYYY/MM/DD]
    """
    words, fields = split_field_args(args)
    title = fields.pop("title", " ".join(words))
    try:
        task = create_task(state.repository, title, fields)
    except ValueError as e:
        return f"Task not created: {e}"
    if task is None:
        return "Task could not be saved. Check the log for details."
    total = state.repository.count_active()
    return f"Task saved: {task.title} #{render.short_id(task)} (active tasks: {total})"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <number|id> field=value ...
    Fields: title, desc, status, difficulty, category (numeric codes), due (YYYY/MM/DD or none).
    """
    if len(args) < 2:
        return "Usage: /edit <number|id> field=value ...\n" + render.format_all_options()

    words, fields = split_field_args(args[1:])
    if words:
        return f"Unrecognized argument(s): {' '.join(words)}. Use field=value."

    task = _find_task(state, args[0])
    if task is None:
        return f"Task not found: {args[0]}"

    try:
        edited = edit_task(state.repository, task.id, fields)
    except ValueError as e:
        return f"Task not updated: {e}"
    if edited is None:
        return "Task could not be updated. Check the log for details."
    return "Task updated.\n" + render.format_task_details(edited)


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <number|id>"
    task = _find_task(state, args[0])
    if task is None:
        return f"Task not found: {args[0]}"

    deleted = delete_task(state.repository, task.id)
    if deleted is None:
        return "Task could not be deleted. Check the log for details."
    state.last_listing = [t for t in state.last_listing if t.id != task.id]
    return f'Task "{deleted.title}" deleted.'


def cmd_priority(state: AppState, args: list[str]) -> str:
    days = _window_days(state)
    tasks = filter_priority(_visible(state), window_days=days)
    return _show_listing(state, tasks, f"Priority tasks (due within {days} days)")


def cmd_overdue(state: AppState, args: list[str]) -> str:
    return _show_listing(state, filter_overdue(_visible(state)), "Overdue tasks")


def cmd_related(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /related <number|id>"
    base = _find_task(state, args[0])
    if base is None:
        return f"Task not found: {args[0]}"

    related = filter_related_by_category(base, _visible(state))
    heading = f'Related to "{base.title}" (category: {base.category.value})'
    return _show_listing(state, related, heading)


def cmd_stats(state: AppState, args: list[str]) -> str:
    return render.format_stats(compute_stats(state.repository.load()))


def cmd_info(state: AppState, args: list[str]) -> str:
    return state.repository.get_info()


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text=f"List tasks: /list [{LIST_MENU}].", aliases=["ls"])
registry.register("search", cmd_search, help_text="Search tasks by title: /search <term>.")
registry.register("show", cmd_show, help_text="Show task details: /show <number|id>.")
registry.register(
    "add",
    cmd_add,
    help_text="Create a task: /add <title> [desc=... status=N difficulty=N category=N due=YYYY/MM/DD].",
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <number|id> field=value ...")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <number|id>.", aliases=["rm"])
registry.register("priority", cmd_priority, help_text="Active tasks due soon (or already past due).")
registry.register("overdue", cmd_overdue, help_text="Past-due tasks that are not completed.")
registry.register("related", cmd_related, help_text="Tasks in the same category: /related <number|id>.")
registry.register("stats", cmd_stats, help_text="Task statistics.")
registry.register("info", cmd_info, help_text="Storage file information.")
