"""Normalized change model and the two Gerrit wire schemas.

The SSH query protocol and the REST API describe the same change with
different field layouts:

  SSH   project, subject, branch, topic, commitMessage,
        currentPatchSet.{ref, author.name, files[]}
  HTTP  project, subject, branch, topic, current_revision,
        revisions[current_revision].{ref, commit.{message, author.name}, files{}}

from_json() picks the extraction path from the endpoint kind and always
returns the same CommitRecord shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from gerritpick_core.errors import SchemaError
from gerritpick_core.models import EndpointKind, SelectorItem, WorkspaceKind

# Number of leading "/"-separated segments dropped from refs/changes/NN/CHANGE/PS
# to obtain the "CHANGE/PS" form understood by `repo download`.
_REPO_REF_SKIP = 3


@dataclass(frozen=True)
class CommitRecord:
    project: str
    subject: str
    message: str
    author: str
    branch: str
    reference: str
    files: tuple[str, ...] = ()
    topic: str | None = None

    @classmethod
    def from_json(cls, kind: EndpointKind, data: dict) -> CommitRecord:
        if kind is EndpointKind.SSH:
            return _from_ssh(data)
        return _from_http(data)

    def title(self, workspace: WorkspaceKind) -> str:
        prefix = "" if workspace.is_git else f"{self.project} - "
        return f"{prefix}{self.subject} - {self.author}"

    def body(self) -> str:
        return self.message + "\n---\n\nBranch: " + self.branch + "\n\n" + "\n".join(self.files)

    def git_reference(self) -> str:
        return self.reference

    def repo_reference(self) -> str:
        change = "/".join(self.reference.split("/")[_REPO_REF_SKIP:])
        return f"{self.project}.git {change}"

    def reference_for(self, workspace: WorkspaceKind) -> str:
        return self.git_reference() if workspace.is_git else self.repo_reference()

    def as_item(self, workspace: WorkspaceKind) -> SelectorItem:
        return SelectorItem(
            display_text=self.title(workspace),
            preview_text=self.body(),
            output_token=self.reference_for(workspace),
        )


def parse_commits(kind: EndpointKind, records: Iterable[dict]) -> Iterator[CommitRecord]:
    """Lazily parse a JSON array of change records.

    Strict: the first record missing a required field raises SchemaError.
    """
    for data in records:
        yield CommitRecord.from_json(kind, data)


def detect_schema(data: dict) -> EndpointKind:
    """Guess the wire schema of a record read from disk."""
    return EndpointKind.HTTP if "current_revision" in data else EndpointKind.SSH


def _lookup(data: Any, path: str, schema: str, prefix: str = "") -> str:
    """Follow a dotted path through nested dicts; every hop must exist."""
    node = data
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            raise SchemaError(prefix + path, schema)
        node = node[key]
    if node is None or node == "":
        raise SchemaError(prefix + path, schema)
    return str(node)


def _optional_topic(data: dict) -> str | None:
    topic = data.get("topic")
    return str(topic) if topic else None


def _from_ssh(data: dict) -> CommitRecord:
    schema = "SSH"
    patch_set = data.get("currentPatchSet")
    if not isinstance(patch_set, dict):
        raise SchemaError("currentPatchSet", schema)

    # The first entry is the synthetic /COMMIT_MSG file, not a real change.
    # Deletions are reported as negative numbers over ssh.
    files = tuple(
        "{} {} +{} -{}".format(
            (f.get("type") or " ")[0],
            f.get("file", ""),
            f.get("insertions", 0),
            abs(int(f.get("deletions") or 0)),
        )
        for f in (patch_set.get("files") or [])[1:]
    )

    return CommitRecord(
        project=_lookup(data, "project", schema),
        subject=_lookup(data, "subject", schema),
        message=_lookup(data, "commitMessage", schema),
        author=_lookup(data, "currentPatchSet.author.name", schema),
        branch=_lookup(data, "branch", schema),
        reference=_lookup(data, "currentPatchSet.ref", schema),
        files=files,
        topic=_optional_topic(data),
    )


def _from_http(data: dict) -> CommitRecord:
    schema = "HTTP"
    current = _lookup(data, "current_revision", schema)
    revision = (data.get("revisions") or {}).get(current)
    if not isinstance(revision, dict):
        raise SchemaError(f"revisions.{current}", schema)

    files = tuple(
        "{} {} +{} -{}".format(
            info.get("status", ""),
            path,
            info.get("lines_inserted", 0),
            info.get("lines_deleted", 0),
        )
        for path, info in (revision.get("files") or {}).items()
    )

    return CommitRecord(
        project=_lookup(data, "project", schema),
        subject=_lookup(data, "subject", schema),
        message=_lookup(revision, "commit.message", schema, prefix=f"revisions.{current}."),
        author=_lookup(revision, "commit.author.name", schema, prefix=f"revisions.{current}."),
        branch=_lookup(data, "branch", schema),
        reference=_lookup(revision, "ref", schema, prefix=f"revisions.{current}."),
        files=files,
        topic=_optional_topic(data),
    )
