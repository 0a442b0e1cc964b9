"""Core pick orchestration: from a query to executed fetch commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

from gerritpick_core.commit import CommitRecord, detect_schema
from gerritpick_core.config import Settings
from gerritpick_core.errors import ParseError
from gerritpick_core.executor import BatchResult, plan_commands, run_batch
from gerritpick_core.models import Action, WorkspaceKind
from gerritpick_core.query import create_query
from gerritpick_core.references import resolve_selection
from gerritpick_core.remote import RemoteClient
from gerritpick_core.topics import expand_topics
from gerritpick_core.utils.process import Runner, run_command
from gerritpick_core.utils.prompt import Confirm, confirm as default_confirm

logger = logging.getLogger(__name__)


def build_query(settings: Settings, project: str | None, text: str) -> str:
    return create_query(
        include_closed=settings.include_closed,
        project=settings.project or project or None,
        text=text,
        limit=settings.limit,
    )


def load_changes_file(path: str) -> Iterator[CommitRecord]:
    """Yield commits from a JSON array of change records saved on disk.

    Records may use either wire schema; each one is detected on its own.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Change file not found: {path}")
    try:
        records = json.loads(p.read_text())
    except json.JSONDecodeError as e:
        raise ParseError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(records, list):
        raise ParseError(f"{path} must contain a JSON array of changes.")
    for data in records:
        yield CommitRecord.from_json(detect_schema(data), data)


def fetch_candidates(query: str, client: RemoteClient | None, file: str | None = None) -> Iterator[CommitRecord]:
    """Stream candidate commits from the file override or from Gerrit."""
    if file:
        logger.debug("Reading changes from %s", file)
        yield from load_changes_file(file)
        return
    if client is None:
        raise ValueError("A remote client is required when no change file is given.")
    yield from client.iter_commits(query)


def run_pick(
    selected: list[CommitRecord],
    action: Action,
    workspace: WorkspaceKind,
    client: RemoteClient | None,
    runner: Runner = run_command,
    confirm: Confirm = default_confirm,
) -> BatchResult:
    """Resolve, expand, plan and execute the selected commits."""
    refs = resolve_selection(selected, workspace)
    expand_topics(selected, refs, client, workspace, confirm=confirm)
    commands = plan_commands(refs, action, workspace)
    logger.debug("Planned %d command(s)", len(commands))
    return run_batch(commands, action, runner=runner, confirm=confirm)
