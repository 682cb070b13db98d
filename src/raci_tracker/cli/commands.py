# src/raci_tracker/cli/commands.py

from __future__ import annotations

import contextlib
import logging
import shlex
from collections.abc import Callable
from pathlib import Path

from ..core.state import AppState
from ..planning.plan_generator import add_generated_tasks, generate_raci_plan
from ..tracker.due_dates import parse_due_date
from ..tracker.models import Task, TaskStatus
from ..tracker.role_picker import picker_for, role_field
from ..tracker.views import TaskFilter, visible_tasks
from ..transfer.bridge import ImportFormatError, import_file, write_export_file
from .render import task_detail, task_line

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], str]

logger = logging.getLogger(__name__)


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
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


class CommandError(Exception):
    """A user mistake; str(err) is shown as the reply."""


# ---- argument helpers ----

def _split_options(args: list[str], allowed: set[str]) -> tuple[list[str], dict[str, str]]:
    """Split ["word", "--due", "2024-01-01", ...] into positionals and {option: value}."""
    positional: list[str] = []
    options: dict[str, str] = {}
    i = 0
    while i < len(args):
        tok = args[i]
        if tok.startswith("--"):
            key = tok[2:].lower()
            if key not in allowed:
                raise CommandError(f"Unknown option: {tok}")
            if i + 1 >= len(args):
                raise CommandError(f"Missing value for {tok}")
            options[key] = args[i + 1]
            i += 2
            continue
        positional.append(tok)
        i += 1
    return positional, options


def _due_option(raw: str) -> str | None:
    if raw.strip().lower() in ("", "none", "clear", "-"):
        return None
    try:
        return parse_due_date(raw).isoformat()
    except ValueError as e:
        raise CommandError(str(e)) from None


def _resolve_task(state: AppState, ref: str | None) -> Task:
    """
    Find a task by "#N" (row in the current list), full id, or unique id prefix.
    """
    if not ref:
        raise CommandError("Missing task reference (use #N from /list, or an id).")

    if ref.startswith("#"):
        try:
            pos = int(ref[1:])
        except ValueError:
            raise CommandError(f"Bad row number: {ref}") from None
        rows = visible_tasks(state.store.all(), state.task_filter)
        if not 1 <= pos <= len(rows):
            raise CommandError(f"No row {ref} in the current list ({state.task_filter.value}).")
        return rows[pos - 1]

    exact = state.store.get(ref)
    if exact is not None:
        return exact

    matches = [t for t in state.store.all() if t.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise CommandError(f"Task not found: {ref}")
    raise CommandError(f"Ambiguous task id prefix: {ref}")


def _parse_status(raw: str | None) -> TaskStatus:
    if not raw:
        raise CommandError("Missing status (todo | in-progress | done | archived).")
    key = raw.strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return TaskStatus(key)
    except ValueError:
        raise CommandError(f"Unknown status: {raw} (todo | in-progress | done | archived).") from None


def _guarded(handler: CommandHandler) -> CommandHandler:
    def wrapper(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
        try:
            return handler(state, args, emit)
        except CommandError as e:
            return str(e)

    wrapper.__name__ = getattr(handler, "__name__", "command")
    wrapper.__doc__ = handler.__doc__
    return wrapper


# ---- commands ----

def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /list                -> current filter
    /list all|todo|in-progress|done|archived
    """
    if args:
        try:
            state.task_filter = TaskFilter.parse(" ".join(args))
        except ValueError:
            raise CommandError("Unknown filter. Use: all | todo | in-progress | done | archived.") from None

    rows = visible_tasks(state.store.all(), state.task_filter)
    header = f"{state.task_filter.value.replace('_', ' ')}: {len(rows)} Tasks"
    if not rows:
        if state.task_filter is TaskFilter.ARCHIVED:
            return f"{header}\nNo tasks found. Archived tasks will appear here."
        return f"{header}\nNo tasks found. Create one with /add or use /plan."
    lines = [header]
    lines.extend(task_line(i, t) for i, t in enumerate(rows, start=1))
    return "\n".join(lines)


def cmd_show(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _resolve_task(state, args[0] if args else None)
    return task_detail(task)


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/add <title> [--desc text] [--due YYYY-MM-DD]"""
    positional, opts = _split_options(args, {"desc", "due"})
    task = Task.new(
        title=" ".join(positional),
        description=opts.get("desc", ""),
        due_date=_due_option(opts["due"]) if "due" in opts else None,
    )
    created = state.store.create(task)
    rows = visible_tasks(state.store.all(), state.task_filter)
    position = next((i for i, t in enumerate(rows, start=1) if t.id == created.id), None)
    if position is None:
        return f'Added: "{created.title}" id={created.id} (hidden by the {state.task_filter.value} filter)'
    return f"Added: {task_line(position, created)}"


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/edit <ref> [--title T] [--desc D] [--due YYYY-MM-DD|none]"""
    positional, opts = _split_options(args, {"title", "desc", "due"})
    task = _resolve_task(state, positional[0] if positional else None)

    fields: dict[str, object] = {}
    if "title" in opts:
        fields["title"] = opts["title"]
    if "desc" in opts:
        fields["description"] = opts["desc"]
    if "due" in opts:
        fields["due_date"] = _due_option(opts["due"])
    if not fields:
        return "Nothing to change. Use --title, --desc or --due."

    updated = state.store.update(task.id, **fields)
    return task_detail(updated or task)


def cmd_due(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/due <ref> <YYYY-MM-DD|none>"""
    task = _resolve_task(state, args[0] if args else None)
    if len(args) < 2:
        raise CommandError("Usage: /due <ref> <YYYY-MM-DD|none>")
    updated = state.store.update(task.id, due_date=_due_option(args[1]))
    return task_detail(updated or task)


def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/status <ref> <todo|in-progress|done|archived>"""
    task = _resolve_task(state, args[0] if args else None)
    new_status = _parse_status(args[1] if len(args) > 1 else None)
    updated = state.store.set_status(task.id, new_status)
    return f'Task "{task.title}" -> {(updated or task).status.label}.'


def cmd_archive(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _resolve_task(state, args[0] if args else None)
    if task.is_archived:
        return f'Task "{task.title}" is already archived.'
    state.store.set_status(task.id, TaskStatus.ARCHIVED)
    return f'Archived "{task.title}" (was {task.status.label}).'


def cmd_restore(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _resolve_task(state, args[0] if args else None)
    if not task.is_archived:
        return f'Task "{task.title}" is not archived.'
    restored = state.store.restore(task.id)
    return f'Restored "{task.title}" to {(restored or task).status.label}.'


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _resolve_task(state, args[0] if args else None)
    if not task.is_archived:
        return f'Task "{task.title}" is active. Archive it first (/archive), then delete.'
    state.store.delete(task.id)
    return f'Deleted "{task.title}" permanently.'


def cmd_assign(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /assign <ref> <R|A|C|I> <name>

    R/C/I toggle the name in the list; A replaces the single accountable person.
    """
    if len(args) < 3:
        raise CommandError("Usage: /assign <ref> <R|A|C|I> <name>")
    task = _resolve_task(state, args[0])
    try:
        rf = role_field(args[1])
    except ValueError as e:
        raise CommandError(str(e)) from None
    name = " ".join(args[2:]).strip()
    if not name:
        raise CommandError("Usage: /assign <ref> <R|A|C|I> <name>")

    picker = picker_for(task.roles, rf.letter, state.roster.names)
    picker.open()
    picker.select(name)
    picker.dismiss()

    state.store.update(task.id, roles=rf.apply(task.roles, picker.value))
    note = "" if name in state.roster else f" (note: {name!r} is not in the roster)"
    verb = "now" if picker.is_selected(name) else "no longer"
    return f'{name} is {verb} {rf.label} on "{task.title}".{note}'


def cmd_unassign(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/unassign <ref> <R|A|C|I> <name>"""
    if len(args) < 3:
        raise CommandError("Usage: /unassign <ref> <R|A|C|I> <name>")
    task = _resolve_task(state, args[0])
    try:
        rf = role_field(args[1])
    except ValueError as e:
        raise CommandError(str(e)) from None
    name = " ".join(args[2:]).strip()

    picker = picker_for(task.roles, rf.letter, state.roster.names)
    if not picker.is_selected(name):
        return f'{name} is not {rf.label} on "{task.title}".'
    picker.remove(name)
    state.store.update(task.id, roles=rf.apply(task.roles, picker.value))
    return f'Removed {name} from {rf.label} on "{task.title}".'


def cmd_roster(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /roster              -> list names
    /roster add <name>
    /roster remove <name>
    """
    if not args or args[0].lower() == "list":
        if not len(state.roster):
            return "No people in roster."
        return "Team roster:\n" + "\n".join(f"  {n}" for n in state.roster)

    sub = args[0].lower()
    name = " ".join(args[1:])

    if sub == "add":
        if state.roster.add(name):
            return f"Added {name.strip()!r} to the roster."
        return "Nothing added (empty name or already in the roster)."

    if sub in ("remove", "rm"):
        if state.roster.remove(name):
            return f"Removed {name!r} from the roster. Existing task assignments are kept."
        return f"{name!r} is not in the roster."

    return "Usage: /roster | /roster add <name> | /roster remove <name>"


def cmd_plan(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/plan <goal> -> ask the AI for 3-5 RACI tasks and add them as TODO."""
    goal = " ".join(args).strip()
    if not goal:
        return "Usage: /plan <project goal>"
    if state.generating:
        return "A plan is already being generated. Please wait."

    if emit:
        with contextlib.suppress(Exception):
            emit("[AI] Generating plan...")

    state.generating = True
    try:
        suggestions = generate_raci_plan(state.llm, goal)
    finally:
        state.generating = False

    if not suggestions:
        return "Failed to generate plan. Please try again."

    created = add_generated_tasks(state.store, suggestions)
    lines = [f"Added {len(created)} tasks:"]
    lines.extend(f"  - {t.title}" for t in created)
    return "\n".join(lines)


def cmd_export(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    directory = Path(args[0]) if args else Path(getattr(state.settings, "export_dir", "."))
    try:
        path = write_export_file(state.store, state.roster, directory)
    except OSError as e:
        logger.exception("Export failed.")
        return f"Export failed: {e}"
    return f"Exported {len(state.store)} tasks and {len(state.roster)} people to {path}"


def cmd_import(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /import <path/to/backup.json>"
    path = Path(" ".join(args)).expanduser()
    try:
        replaced = import_file(path, state.store, state.roster, confirm=state.confirm)
    except ImportFormatError as e:
        return str(e)
    except OSError as e:
        logger.info("Import read failed path=%s: %s", path, e)
        return f"Could not read {path}: {e.strerror or e}"
    if not replaced:
        return "Import cancelled. Nothing changed."
    return f"Imported {len(state.store)} tasks and {len(state.roster)} people."


def cmd_theme(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/theme -> toggle; /theme light|dark -> set."""
    if args:
        wanted = args[0].lower()
        if wanted not in ("light", "dark"):
            return "Usage: /theme [light|dark]"
        if wanted != state.theme:
            state.toggle_theme()
    else:
        state.toggle_theme()
    return f"Theme: {state.theme}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "list", _guarded(cmd_list), help_text="List tasks: /list [all|todo|in-progress|done|archived]."
)
registry.register("show", _guarded(cmd_show), help_text="Show one task: /show <#N|id>.")
registry.register(
    "add", _guarded(cmd_add), help_text="New task: /add <title> [--desc text] [--due YYYY-MM-DD]."
)
registry.register(
    "edit", _guarded(cmd_edit), help_text="Edit: /edit <#N|id> [--title T] [--desc D] [--due DATE|none]."
)
registry.register("due", _guarded(cmd_due), help_text="Set due date: /due <#N|id> <YYYY-MM-DD|none>.")
registry.register(
    "status", _guarded(cmd_status), help_text="Set status: /status <#N|id> <todo|in-progress|done|archived>."
)
registry.register("archive", _guarded(cmd_archive), help_text="Archive a task: /archive <#N|id>.")
registry.register(
    "restore", _guarded(cmd_restore), help_text="Restore an archived task to its previous status."
)
registry.register(
    "delete", _guarded(cmd_delete), help_text="Delete an archived task permanently: /delete <#N|id>."
)
registry.register(
    "assign", _guarded(cmd_assign), help_text="Toggle a RACI role: /assign <#N|id> <R|A|C|I> <name>."
)
registry.register(
    "unassign", _guarded(cmd_unassign), help_text="Remove a RACI role: /unassign <#N|id> <R|A|C|I> <name>."
)
registry.register(
    "roster", _guarded(cmd_roster), help_text="Team roster: /roster | /roster add|remove <name>."
)
registry.register("plan", _guarded(cmd_plan), help_text="AI Assist: /plan <project goal>.", aliases=["ai"])
registry.register("export", _guarded(cmd_export), help_text="Export a JSON backup: /export [dir].")
registry.register("import", _guarded(cmd_import), help_text="Import a JSON backup (overwrites!).")
registry.register("theme", _guarded(cmd_theme), help_text="Toggle theme: /theme [light|dark].")
