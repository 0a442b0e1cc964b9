"""Command planning and interactive batch execution.

A batch moves through:

    PLANNED -> CONFIRMED -> RUNNING -> COMPLETED
                                    -> ABORTED_WITH_REMAINDER
    PLANNED -> DECLINED

Commands are independent of each other, so a failure only asks whether to
go on. Whatever was not executed is printed as one " && "-joined line the
user can paste later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from rich.console import Console
from rich.markup import escape

from gerritpick_core.models import Action, WorkspaceKind
from gerritpick_core.utils.process import Runner, run_command
from gerritpick_core.utils.prompt import Confirm, confirm as default_confirm

console = Console()
logger = logging.getLogger(__name__)


class BatchState(Enum):
    PLANNED = "planned"
    DECLINED = "declined"
    CONFIRMED = "confirmed"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED_WITH_REMAINDER = "aborted-with-remainder"


@dataclass(frozen=True)
class PlannedCommand:
    title: str
    command: str


@dataclass
class BatchResult:
    state: BatchState = BatchState.PLANNED
    succeeded: list[PlannedCommand] = field(default_factory=list)
    failed: list[PlannedCommand] = field(default_factory=list)
    remaining: list[PlannedCommand] = field(default_factory=list)

    @property
    def resume_line(self) -> str | None:
        return join_commands(self.remaining) if self.remaining else None

    @property
    def ok(self) -> bool:
        return self.state is BatchState.COMPLETED and not self.failed


def plan_command(reference: str, action: Action, workspace: WorkspaceKind) -> str:
    if workspace.is_git:
        return f"git fetch origin {reference} && git {action.value} FETCH_HEAD"
    flag = " --cherry-pick" if action is Action.CHERRY_PICK else ""
    return f"repo download {reference}{flag}"


def plan_commands(
    refs: Iterable[tuple[str, str]],
    action: Action,
    workspace: WorkspaceKind,
) -> list[PlannedCommand]:
    return [PlannedCommand(title, plan_command(reference, action, workspace)) for title, reference in refs]


def join_commands(commands: Iterable[PlannedCommand]) -> str:
    return " && ".join(c.command for c in commands)


def execute_command(planned: PlannedCommand, runner: Runner = run_command) -> bool:
    result = runner(planned.command)
    if result.ok:
        console.print(f"{escape(planned.title)}: [green]Ok[/green]", highlight=False, soft_wrap=True)
    else:
        console.print(f"{escape(planned.title)}: [red]Failed[/red]", highlight=False, soft_wrap=True)
        logger.debug("%s failed:\n%s", planned.command, result.stderr.strip())
    return result.ok


def run_batch(
    commands: list[PlannedCommand],
    action: Action,
    runner: Runner = run_command,
    confirm: Confirm = default_confirm,
) -> BatchResult:
    """Confirm once, then run every planned command in order."""
    batch = BatchResult(remaining=list(commands))
    if not commands:
        batch.state = BatchState.COMPLETED
        return batch

    console.print(f"{action.label} the following commit(s) now?", markup=False)
    for planned in commands:
        console.print(f"* {planned.title}", markup=False, soft_wrap=True)

    if not confirm(""):
        batch.state = BatchState.DECLINED
        _print_resume(batch)
        return batch

    batch.state = BatchState.CONFIRMED
    console.print()
    batch.state = BatchState.RUNNING
    while batch.remaining:
        planned = batch.remaining.pop(0)
        if execute_command(planned, runner):
            batch.succeeded.append(planned)
            continue
        batch.failed.append(planned)
        if batch.remaining and not confirm("Do you want to continue?"):
            batch.state = BatchState.ABORTED_WITH_REMAINDER
            _print_resume(batch)
            return batch

    batch.state = BatchState.COMPLETED
    return batch


def _print_resume(batch: BatchResult) -> None:
    if batch.resume_line:
        console.print(f"Run '{batch.resume_line}' to do it later", markup=False, highlight=False, soft_wrap=True)
