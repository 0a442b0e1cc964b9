"""Tests for the process runner and the confirmation prompt."""

import sys

import pytest

from gerritpick_core.utils.process import run_command
from gerritpick_core.utils.prompt import confirm


class TestRunCommand:
    def test_shell_string_success(self):
        result = run_command("echo hello")
        assert result.ok
        assert result.stdout.strip() == "hello"

    def test_shell_string_failure(self):
        result = run_command("exit 3")
        assert not result.ok

    def test_argv_list(self):
        result = run_command([sys.executable, "-c", "import sys; sys.stderr.write('oops'); sys.exit(1)"])
        assert not result.ok
        assert result.stderr == "oops"

    def test_missing_executable_is_failure(self):
        result = run_command(["gerritpick-definitely-not-a-binary"])
        assert not result.ok
        assert result.stderr


class TestConfirm:
    @pytest.mark.parametrize("answer", ["y", "yes", " YES \n", "Y"])
    def test_yes_answers(self, answer):
        assert confirm("Proceed?", input_fn=lambda prompt: answer) is True

    @pytest.mark.parametrize("answer", ["", "n", "no", "yep"])
    def test_anything_else_is_no(self, answer):
        assert confirm("Proceed?", input_fn=lambda prompt: answer) is False

    def test_prompt_text(self):
        seen = []
        confirm("Proceed?", input_fn=lambda prompt: seen.append(prompt) or "n")
        assert seen == ["Proceed? (y/N) "]
