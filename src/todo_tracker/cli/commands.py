# src/todo_tracker/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..core.state import AppState
from ..tasks import task_list
from ..tasks.outcome import Outcome
from ..tasks.task_models import TaskCollection

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_CORRUPT = 3
EXIT_IO = 4

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    text: str
    exit_code: int = EXIT_OK
    outcome: Outcome | None = None

    @property
    def is_error(self) -> bool:
        return self.exit_code != EXIT_OK

    @classmethod
    def from_outcome(cls, outcome: Outcome) -> CommandResult:
        return cls(
            text=outcome.message,
            exit_code=EXIT_OK if outcome.ok else EXIT_FAILED,
            outcome=outcome,
        )

    @classmethod
    def usage(cls, text: str) -> CommandResult:
        return cls(text=text, exit_code=EXIT_USAGE)


CommandHandler = Callable[[AppState, list[str]], CommandResult]


class CommandRegistry:
    """Subcommand registry: maps argv[0] to a handler (list, add, toggle, ...)."""

    def __init__(self, prog: str = "todo") -> None:
        self.prog = prog
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, tuple[str, str]] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        usage: str = "",
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = (usage, help_text)
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, argv: Sequence[str]) -> CommandResult:
        """
        Dispatch one already-split command line, e.g. ["edit", "3", "new", "text"].

        Storage errors (StoreError) are not caught here; the caller owns them.
        """
        if not argv:
            return CommandResult(text=self.build_help())

        name = argv[0].lower()
        handler = self._handlers.get(name)
        if not handler:
            logger.warning("Unknown command: %s", argv[0])
            return CommandResult.usage(
                f"Unknown command: {argv[0]}. Use '{self.prog} help' to list available commands."
            )
        return handler(state, list(argv[1:]))

    def build_help(self) -> str:
        lines = [f"Usage: {self.prog} <command> [arguments]", "", "Commands:"]
        entries = [(f"{name} {usage}".rstrip(), text) for name, (usage, text) in self._help.items()]
        width = max(len(left) for left, _ in entries) if entries else 0
        for left, text in entries:
            lines.append(f"  {left.ljust(width)}  - {text}")
        return "\n".join(lines)


registry = CommandRegistry()


def log_outcome(outcome: Outcome) -> None:
    """Write one structured line per operation outcome."""
    fields = " ".join(f"{k}={v}" for k, v in outcome.log_fields().items() if v is not None)
    if outcome.ok:
        logger.info("%s (changed=%s)", fields, outcome.changed)
    else:
        logger.warning("%s", fields)


def _run(state: AppState, operation: Callable[[TaskCollection], Outcome]) -> CommandResult:
    """load -> one operation -> save (only if it mutated) -> result."""
    collection = state.task_store.load()
    outcome = operation(collection)
    if outcome.ok and outcome.changed:
        state.task_store.save(collection)
    log_outcome(outcome)
    return CommandResult.from_outcome(outcome)


def _need_id(args: list[str], command: str, usage: str) -> CommandResult | None:
    if not args:
        logger.warning("%s: missing task id", command)
        return CommandResult.usage(
            f"Please specify a task id. Usage: {registry.prog} {command} {usage}"
        )
    return None


def cmd_help(state: AppState, args: list[str]) -> CommandResult:
    return CommandResult(text=registry.build_help())


def cmd_list(state: AppState, args: list[str]) -> CommandResult:
    return _run(state, task_list.list_tasks)


def cmd_add(state: AppState, args: list[str]) -> CommandResult:
    if not args:
        logger.warning("add: missing task text")
        return CommandResult.usage(
            f"Please specify the task text. Usage: {registry.prog} add <text>"
        )
    content = " ".join(args)
    return _run(state, lambda c: task_list.add_task(c, content, clock=state.clock))


def cmd_toggle(state: AppState, args: list[str]) -> CommandResult:
    missing = _need_id(args, "toggle", "<id>")
    if missing is not None:
        return missing
    return _run(state, lambda c: task_list.toggle_task(c, args[0], clock=state.clock))


def cmd_delete(state: AppState, args: list[str]) -> CommandResult:
    missing = _need_id(args, "delete", "<id>")
    if missing is not None:
        return missing
    return _run(state, lambda c: task_list.delete_task(c, args[0]))


def cmd_edit(state: AppState, args: list[str]) -> CommandResult:
    """
    edit <id> <text...>

    Words after the id are joined with single spaces.
    """
    if len(args) < 2:
        logger.warning("edit: missing task id or text")
        return CommandResult.usage(
            f"Please specify a task id and the new text. Usage: {registry.prog} edit <id> <text>"
        )
    new_content = " ".join(args[1:])
    return _run(state, lambda c: task_list.edit_task(c, args[0], new_content))


def cmd_clear_all(state: AppState, args: list[str]) -> CommandResult:
    return _run(state, task_list.clear_all)


def cmd_complete_all(state: AppState, args: list[str]) -> CommandResult:
    return _run(state, lambda c: task_list.complete_all(c, clock=state.clock))


registry.register("list", cmd_list, help_text="Show all tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task.", usage="<text>")
registry.register("edit", cmd_edit, help_text="Replace the text of a task.", usage="<id> <text>")
registry.register(
    "toggle", cmd_toggle, help_text="Switch a task between done and not done.", usage="<id>"
)
registry.register("delete", cmd_delete, help_text="Delete a task.", usage="<id>", aliases=["rm"])
registry.register("clear-all", cmd_clear_all, help_text="Delete all tasks and restart ids at 1.")
registry.register("complete-all", cmd_complete_all, help_text="Mark every pending task as done.")
registry.register("help", cmd_help, help_text="Show available commands.", aliases=["-h", "--help"])
