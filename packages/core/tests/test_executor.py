"""Tests for command planning and the interactive batch executor."""

from gerritpick_core.executor import (
    BatchState,
    PlannedCommand,
    join_commands,
    plan_command,
    plan_commands,
    run_batch,
)
from gerritpick_core.models import Action, WorkspaceKind
from gerritpick_core.utils.process import CommandResult


class ScriptedRunner:
    """Fails the commands listed in `failing`, records everything it runs."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    def __call__(self, command):
        self.calls.append(command)
        if command in self.failing:
            return CommandResult(ok=False, stderr="error: could not apply")
        return CommandResult(ok=True)


class ScriptedConfirm:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0)


COMMANDS = [PlannedCommand(f"change {i}", f"repo download p.git {i}/1") for i in range(1, 4)]


class TestPlanning:
    def test_git_checkout(self):
        assert plan_command("refs/changes/41/41/1", Action.CHECKOUT, WorkspaceKind.GIT) == (
            "git fetch origin refs/changes/41/41/1 && git checkout FETCH_HEAD"
        )

    def test_git_cherry_pick(self):
        assert plan_command("refs/changes/41/41/1", Action.CHERRY_PICK, WorkspaceKind.GIT) == (
            "git fetch origin refs/changes/41/41/1 && git cherry-pick FETCH_HEAD"
        )

    def test_repo_checkout_has_no_flag(self):
        assert plan_command("dummy.git 41/1", Action.CHECKOUT, WorkspaceKind.REPO) == "repo download dummy.git 41/1"

    def test_repo_cherry_pick_flag(self):
        assert plan_command("dummy.git 41/1", Action.CHERRY_PICK, WorkspaceKind.GIT_IN_REPO) == (
            "repo download dummy.git 41/1 --cherry-pick"
        )

    def test_one_command_per_pair(self):
        planned = plan_commands([("a", "x.git 1/1"), ("b", "y.git 2/1")], Action.CHECKOUT, WorkspaceKind.REPO)
        assert planned == [
            PlannedCommand("a", "repo download x.git 1/1"),
            PlannedCommand("b", "repo download y.git 2/1"),
        ]

    def test_join_commands(self):
        assert join_commands(COMMANDS[:2]) == "repo download p.git 1/1 && repo download p.git 2/1"


class TestRunBatch:
    def test_declined_runs_nothing_and_prints_resume(self, capsys):
        runner = ScriptedRunner()

        result = run_batch(COMMANDS, Action.CHECKOUT, runner=runner, confirm=ScriptedConfirm(False))

        assert result.state is BatchState.DECLINED
        assert runner.calls == []
        assert result.remaining == COMMANDS
        assert result.resume_line == join_commands(COMMANDS)
        assert f"Run '{join_commands(COMMANDS)}' to do it later" in capsys.readouterr().out

    def test_all_succeed(self):
        runner = ScriptedRunner()

        result = run_batch(COMMANDS, Action.CHECKOUT, runner=runner, confirm=ScriptedConfirm(True))

        assert result.state is BatchState.COMPLETED
        assert result.ok
        assert runner.calls == [c.command for c in COMMANDS]
        assert result.resume_line is None

    def test_abort_after_failure_leaves_remainder(self, capsys):
        runner = ScriptedRunner(failing={COMMANDS[1].command})
        confirm = ScriptedConfirm(True, False)

        result = run_batch(COMMANDS, Action.CHERRY_PICK, runner=runner, confirm=confirm)

        assert result.state is BatchState.ABORTED_WITH_REMAINDER
        assert result.remaining == [COMMANDS[2]]
        assert result.resume_line == COMMANDS[2].command
        assert confirm.prompts[1] == "Do you want to continue?"
        out = capsys.readouterr().out
        assert "change 1: Ok" in out
        assert "change 2: Failed" in out
        assert f"Run '{COMMANDS[2].command}' to do it later" in out

    def test_continue_after_failure_runs_the_rest(self):
        runner = ScriptedRunner(failing={COMMANDS[0].command})

        result = run_batch(COMMANDS, Action.CHECKOUT, runner=runner, confirm=ScriptedConfirm(True, True))

        assert result.state is BatchState.COMPLETED
        assert not result.ok
        assert result.failed == [COMMANDS[0]]
        assert len(result.succeeded) == 2

    def test_failing_last_command_does_not_prompt(self):
        runner = ScriptedRunner(failing={COMMANDS[2].command})
        confirm = ScriptedConfirm(True)

        result = run_batch(COMMANDS, Action.CHECKOUT, runner=runner, confirm=confirm)

        assert result.state is BatchState.COMPLETED
        assert len(confirm.prompts) == 1

    def test_titles_listed_before_confirmation(self, capsys):
        run_batch(COMMANDS, Action.CHERRY_PICK, runner=ScriptedRunner(), confirm=ScriptedConfirm(False))

        out = capsys.readouterr().out
        assert "Cherry pick the following commit(s) now?" in out
        for planned in COMMANDS:
            assert f"* {planned.title}" in out

    def test_empty_batch_completes_without_prompt(self):
        confirm = ScriptedConfirm()

        result = run_batch([], Action.CHECKOUT, runner=ScriptedRunner(), confirm=confirm)

        assert result.state is BatchState.COMPLETED
        assert confirm.prompts == []
