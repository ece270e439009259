# src/nextup/cli/commands.py

from __future__ import annotations

import logging
import math
import re
import time
from collections.abc import Callable
from datetime import datetime

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import Task, TaskStatus

CommandHandler = Callable[[AppState, list[str], float], str]

logger = logging.getLogger(__name__)


class CommandError(ValueError):
    """A command was rejected; the message is the reply shown to the user."""


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /next, ...)."""

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

    def dispatch(self, state: AppState, line: str, now_ts: float | None = None) -> str | None:
        """
        Run a string like "/command args".

        Returns the reply, or None if the line is not a command.
        Raises CommandError when the command is unknown or rejects its arguments.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            raise CommandError("Empty command. Use /help to list available commands.")

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            raise CommandError(f"Unknown command: /{name}. Use /help to list available commands.")

        now = time.time() if now_ts is None else float(now_ts)
        return handler(state, args, now)

    def handle(self, state: AppState, line: str, now_ts: float | None = None) -> str | None:
        """
        Like dispatch(), but a rejected command comes back as its reply text.
        Used by interactive connectors.
        """
        try:
            return self.dispatch(state, line, now_ts=now_ts)
        except CommandError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- time parsing / formatting ----

_UNIT_SECONDS = {
    "m": 60.0,
    "min": 60.0,
    "h": 3600.0,
    "d": 86400.0,
    "w": 7 * 86400.0,
}

_RELATIVE_RE = re.compile(r"^(?:in\s*)?(\d+(?:\.\d+)?)\s*(min|m|h|d|w)$", re.IGNORECASE)
# Extended (2026-10-20) and basic (20261020) ISO calendar dates.
_DATE_ONLY_RE = re.compile(r"^\d{4}-?\d{2}-?\d{2}$")


def parse_when(text: str, *, now: float) -> float:
    """
    Parse a deadline into an epoch timestamp.

    Accepted forms:
    - relative: "30m", "2h", "3d", "1w", "in 2h"
    - ISO date "2026-10-20" or "20261020" (end of that local day)
    - ISO datetime "2026-10-20T18:00" (local time unless an offset is given)

    Raises ValueError for anything else.
    """
    raw = (text or "").strip()
    if not raw:
        raise ValueError("empty time expression")

    m = _RELATIVE_RE.match(raw)
    if m:
        amount = float(m.group(1))
        ts = float(now) + amount * _UNIT_SECONDS[m.group(2).lower()]
    else:
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            raise ValueError(f"unrecognized time expression: {raw!r}") from None
        if _DATE_ONLY_RE.match(raw):
            dt = dt.replace(hour=23, minute=59, second=59)
        ts = dt.timestamp()

    if not math.isfinite(ts):
        raise ValueError(f"time expression out of range: {raw!r}")
    return ts


def format_duration(seconds: float) -> str:
    seconds = abs(float(seconds))
    if seconds < 3600:
        return f"{max(1, int(seconds // 60))}m"
    if seconds < 86400:
        return f"{seconds / 3600:.1f}h"
    return f"{seconds / 86400:.1f}d"


def _deadline_phrase(deadline_at: float | None, now: float) -> str:
    if deadline_at is None:
        return "no deadline"
    delta = deadline_at - now
    if delta >= 0:
        return f"due in {format_duration(delta)}"
    return f"overdue by {format_duration(delta)}"


def describe_deadline(task: Task, now: float) -> str:
    return _deadline_phrase(task.deadline_at, now)


def _format_task(task: Task, now: float) -> str:
    line = f"#{task.id} {task.description} ({describe_deadline(task, now)})"
    if task.defer_count:
        line += f" [deferred x{task.defer_count}]"
    return line


def _parse_task_id(args: list[str], usage: str) -> int:
    if not args:
        raise CommandError(usage)
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        raise CommandError(usage) from None


def _parse_deadline(when: str, usage: str, now: float) -> float:
    try:
        return parse_when(when, now=now)
    except ValueError as e:
        raise CommandError(f"{e}. {usage}") from None


# ---- handlers ----


def cmd_help(state: AppState, args: list[str], now: float) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str], now: float) -> str:
    """
    /add <description>               -> task without deadline
    /add <description> --due <when>  -> task with deadline
    """
    usage = "Usage: /add <description> [--due <when>]"
    deadline_at: float | None = None

    if "--due" in args:
        idx = args.index("--due")
        deadline_at = _parse_deadline(" ".join(args[idx + 1 :]), usage, now)
        args = args[:idx]

    description = " ".join(args).strip()
    if not description:
        raise CommandError(usage)

    task_id = state.task_store.add_task(
        description=description, deadline_at=deadline_at, now_ts=now
    )
    return f"Added #{task_id}: {description}"


def cmd_list(state: AppState, args: list[str], now: float) -> str:
    limit = int(getattr(state.settings, "list_limit", 50))
    tasks = state.task_store.list_open_tasks(limit=limit)
    if not tasks:
        return "No open tasks."
    lines = [f"Open tasks ({len(tasks)}):"]
    lines.extend(f"  {_format_task(t, now)}" for t in tasks)
    return "\n".join(lines)


def cmd_next(state: AppState, args: list[str], now: float) -> str:
    task = task_api.pick_next_task(state, now_ts=now)
    if task is None:
        return "Nothing to do: no open tasks."
    return f"Next: {_format_task(task, now)}"


def cmd_why(state: AppState, args: list[str], now: float) -> str:
    rows = task_api.explain_ranking(state, now_ts=now)
    if not rows:
        return "No open tasks."
    lines = ["Dominance ranking (tasks dominated by each):"]
    for task, ranked in rows:
        lines.append(f"  {ranked.dominance_count:3d}  {_format_task(task, now)}")
    return "\n".join(lines)


def cmd_defer(state: AppState, args: list[str], now: float) -> str:
    task_id = _parse_task_id(args, "Usage: /defer <id>")
    if not task_api.defer(state, task_id, now_ts=now):
        raise CommandError(f"No open task #{task_id}.")
    return f"Deferred #{task_id}."


def cmd_done(state: AppState, args: list[str], now: float) -> str:
    task_id = _parse_task_id(args, "Usage: /done <id>")
    if not task_api.complete(state, task_id, now_ts=now):
        raise CommandError(f"No open task #{task_id}.")
    return f"Done #{task_id}."


def cmd_drop(state: AppState, args: list[str], now: float) -> str:
    task_id = _parse_task_id(args, "Usage: /drop <id>")
    if not task_api.cancel(state, task_id, now_ts=now):
        raise CommandError(f"No open task #{task_id}.")
    return f"Dropped #{task_id}."


def cmd_due(state: AppState, args: list[str], now: float) -> str:
    """
    /due <id> <when>  -> set deadline
    /due <id> none    -> clear deadline
    """
    usage = "Usage: /due <id> <when|none>"
    task_id = _parse_task_id(args, usage)

    when = " ".join(args[1:]).strip()
    if not when:
        raise CommandError(usage)

    deadline_at: float | None
    if when.lower() in ("none", "clear", "-"):
        deadline_at = None
    else:
        deadline_at = _parse_deadline(when, usage, now)

    if not state.task_store.set_deadline(task_id, deadline_at):
        raise CommandError(f"No open task #{task_id}.")
    logger.debug("Deadline updated task_id=%s deadline_at=%s", task_id, deadline_at)
    if deadline_at is None:
        return f"Cleared deadline of #{task_id}."
    return f"Deadline of #{task_id} set ({_deadline_phrase(deadline_at, now)})."


def cmd_status(state: AppState, args: list[str], now: float) -> str:
    store = state.task_store
    db_path = getattr(store, "db_path", None) or getattr(state.settings, "tasks_db_path", "?")
    return (
        "Status:\n"
        f"  Open: {store.count_tasks(TaskStatus.OPEN)}\n"
        f"  Done: {store.count_tasks(TaskStatus.DONE)}\n"
        f"  Total: {store.count_tasks()}\n"
        f"  Database: {db_path}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <description> [--due <when>].")
registry.register("list", cmd_list, help_text="List open tasks.", aliases=["ls"])
registry.register("next", cmd_next, help_text="Show the task to work on next.", aliases=["n"])
registry.register("why", cmd_why, help_text="Show dominance counts behind /next.")
registry.register("defer", cmd_defer, help_text="Snooze a task: /defer <id>.", aliases=["snooze"])
registry.register("done", cmd_done, help_text="Complete a task: /done <id>.")
registry.register("drop", cmd_drop, help_text="Cancel a task: /drop <id>.")
registry.register("due", cmd_due, help_text="Set/clear a deadline: /due <id> <when|none>.")
registry.register("status", cmd_status, help_text="Show task totals and database path.")
