"""Topic expansion: offer to pull in every open change sharing a topic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from rich.console import Console

from gerritpick_core.query import topic_query
from gerritpick_core.utils.prompt import Confirm, confirm as default_confirm

if TYPE_CHECKING:
    from gerritpick_core.commit import CommitRecord
    from gerritpick_core.models import WorkspaceKind
    from gerritpick_core.references import ReferenceSet
    from gerritpick_core.remote import RemoteClient

console = Console()
logger = logging.getLogger(__name__)


def collect_topics(commits: Iterable[CommitRecord]) -> list[str]:
    """Distinct non-empty topics, in the order they were first seen."""
    topics: list[str] = []
    for commit in commits:
        if commit.topic and commit.topic not in topics:
            topics.append(commit.topic)
    return topics


def expand_topics(
    commits: list[CommitRecord],
    refs: ReferenceSet,
    client: RemoteClient | None,
    workspace: WorkspaceKind,
    confirm: Confirm = default_confirm,
) -> int:
    """Ask to add the rest of each selected topic to refs.

    Returns the number of new (title, reference) pairs introduced.

    Expanded changes are always keyed by their repo-style reference, even in a
    plain Git workspace: a topic may span projects that only `repo download`
    can reach.
    """
    topics = collect_topics(commits)
    if not topics:
        return 0
    if client is None:
        logger.warning("No Gerrit remote configured; skipping topic expansion for %s", ", ".join(topics))
        return 0

    console.print("Your selected commits are part of the following topic(s):", markup=False)
    for topic in topics:
        console.print(f"* {topic}", markup=False, soft_wrap=True)
    if not confirm("Would you like to download those commits as well?"):
        return 0

    added = 0
    for topic in topics:
        for commit in client.query_commits_lenient(topic_query(topic)):
            if refs.add(commit.title(workspace), commit.repo_reference()):
                added += 1
    logger.debug("Topic expansion added %d change(s)", added)
    return added
