"""Reference resolution and de-duplication of selected changes.

A plain Git workspace fetches refs/changes/... directly; a repo manifest
checkout (with or without a nested Git repository) hands
"<project>.git <change>/<patchset>" to `repo download`.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from gerritpick_core.commit import CommitRecord
from gerritpick_core.models import WorkspaceKind


class ReferenceSet:
    """Insertion-ordered set of (title, reference) pairs."""

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()):
        self._pairs: dict[tuple[str, str], None] = {}
        for title, reference in pairs:
            self.add(title, reference)

    def add(self, title: str, reference: str) -> bool:
        """Insert a pair; return False when it was already present."""
        key = (title, reference)
        if key in self._pairs:
            return False
        self._pairs[key] = None
        return True

    def add_selected(self, commit: CommitRecord, workspace: WorkspaceKind) -> bool:
        return self.add(commit.title(workspace), commit.reference_for(workspace))

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, pair: object) -> bool:
        return pair in self._pairs

    def __repr__(self) -> str:
        return f"ReferenceSet({list(self._pairs)!r})"


def resolve_selection(commits: Iterable[CommitRecord], workspace: WorkspaceKind) -> ReferenceSet:
    refs = ReferenceSet()
    for commit in commits:
        refs.add_selected(commit, workspace)
    return refs
