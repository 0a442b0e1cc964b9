"""Discover what kind of checkout gerritpick runs in and where its Gerrit lives.

Discovery shells out to `repo` and `git` once at startup; the resulting
Workspace is read-only for the rest of the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from gerritpick_core.errors import ConfigError
from gerritpick_core.models import WorkspaceKind
from gerritpick_core.utils.process import Runner, run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Workspace:
    kind: WorkspaceKind
    project_name: str = ""
    remote_url: str = ""


def detect_kind(runner: Runner = run_command) -> WorkspaceKind:
    in_repo = runner(["repo", "status"]).ok
    in_git = runner(["git", "rev-parse", "--is-inside-work-tree"]).ok
    if in_repo and in_git:
        return WorkspaceKind.GIT_IN_REPO
    if in_repo:
        return WorkspaceKind.REPO
    if in_git:
        return WorkspaceKind.GIT
    raise ConfigError("Must be run inside a git repository or a repo checkout.")


def read_git_config(key: str, directory: str = ".", runner: Runner = run_command) -> str:
    result = runner(["git", "-C", directory, "config", "--get", key])
    return result.stdout.strip() if result.ok else ""


def manifest_dir(runner: Runner = run_command) -> str:
    """Path of the repo manifest project relative to the current directory."""
    result = runner(["repo", "list", "manifest.git", "--relative-to=."])
    if not result.ok:
        return ""
    parts = result.stdout.split()
    return parts[0] if parts else ""


def server_url(remote: str) -> str:
    """Strip the project path from a remote URL, keeping the server root.

    Authenticated HTTP remotes carry a one-letter prefix such as /a/, which
    belongs to the server root.
    """
    parts = remote.split("/")
    if len(parts) > 3 and len(parts[3]) == 1:
        return "/".join(parts[:4])
    return "/".join(parts[:3])


def guess_remote(kind: WorkspaceKind, runner: Runner = run_command) -> str:
    directory = "."
    if not kind.is_git:
        directory = manifest_dir(runner) or "."
    remote = read_git_config("remote.origin.url", directory, runner)
    return server_url(remote) if remote else ""


def project_name(remote_url: str, runner: Runner = run_command) -> str:
    name = read_git_config("remote.origin.projectname", ".", runner).removesuffix(".git")
    if name:
        return name
    url = read_git_config("remote.origin.url", ".", runner).removesuffix(".git")
    if remote_url and url.startswith(remote_url):
        url = url[len(remote_url):]
    return url.lstrip("/")


def discover_workspace(runner: Runner = run_command) -> Workspace:
    kind = detect_kind(runner)
    remote = guess_remote(kind, runner)
    name = project_name(remote, runner)
    logger.debug("Workspace: kind=%s remote=%r project=%r", kind.value, remote, name)
    return Workspace(kind=kind, project_name=name, remote_url=remote)
