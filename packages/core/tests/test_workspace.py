"""Tests for workspace discovery."""

import pytest

from gerritpick_core.errors import ConfigError
from gerritpick_core.models import WorkspaceKind
from gerritpick_core.utils.process import CommandResult
from gerritpick_core.workspace import (
    Workspace,
    detect_kind,
    discover_workspace,
    guess_remote,
    project_name,
    server_url,
)


class FakeShell:
    """Answers commands from a table keyed by the joined argv; anything else fails."""

    def __init__(self, answers):
        self.answers = answers
        self.calls = []

    def __call__(self, command):
        key = " ".join(command)
        self.calls.append(key)
        if key in self.answers:
            return CommandResult(ok=True, stdout=self.answers[key])
        return CommandResult(ok=False, stderr="not found")


IN_GIT = {"git rev-parse --is-inside-work-tree": "true\n"}
IN_REPO = {"repo status": ""}


class TestDetectKind:
    def test_git(self):
        assert detect_kind(FakeShell(IN_GIT)) is WorkspaceKind.GIT

    def test_repo(self):
        assert detect_kind(FakeShell(IN_REPO)) is WorkspaceKind.REPO

    def test_git_in_repo(self):
        assert detect_kind(FakeShell({**IN_GIT, **IN_REPO})) is WorkspaceKind.GIT_IN_REPO

    def test_neither_raises(self):
        with pytest.raises(ConfigError):
            detect_kind(FakeShell({}))


class TestServerUrl:
    def test_ssh_remote(self):
        assert server_url("ssh://gerrit.example.com:29418/platform/build") == "ssh://gerrit.example.com:29418"

    def test_authenticated_http_prefix_kept(self):
        assert server_url("https://review.example.com/a/platform/build") == "https://review.example.com/a"

    def test_plain_http(self):
        assert server_url("https://review.example.com/platform/build") == "https://review.example.com"


class TestGuessRemote:
    def test_git_reads_origin_of_current_dir(self):
        shell = FakeShell({"git -C . config --get remote.origin.url": "ssh://gerrit:29418/dummy\n"})
        assert guess_remote(WorkspaceKind.GIT, shell) == "ssh://gerrit:29418"

    def test_repo_reads_manifest_origin(self):
        shell = FakeShell(
            {
                "repo list manifest.git --relative-to=.": ".repo/manifests : manifest\n",
                "git -C .repo/manifests config --get remote.origin.url": "https://review.example.com/a/manifest\n",
            }
        )
        assert guess_remote(WorkspaceKind.REPO, shell) == "https://review.example.com/a"

    def test_no_remote_is_empty(self):
        assert guess_remote(WorkspaceKind.GIT, FakeShell({})) == ""


class TestProjectName:
    def test_projectname_config_wins(self):
        shell = FakeShell({"git -C . config --get remote.origin.projectname": "platform/build.git\n"})
        assert project_name("ssh://gerrit:29418", shell) == "platform/build"

    def test_falls_back_to_origin_url(self):
        shell = FakeShell({"git -C . config --get remote.origin.url": "ssh://gerrit:29418/platform/build.git\n"})
        assert project_name("ssh://gerrit:29418", shell) == "platform/build"


def test_discover_workspace():
    shell = FakeShell({**IN_GIT, "git -C . config --get remote.origin.url": "ssh://gerrit:29418/dummy\n"})
    assert discover_workspace(shell) == Workspace(
        kind=WorkspaceKind.GIT, project_name="dummy", remote_url="ssh://gerrit:29418"
    )
