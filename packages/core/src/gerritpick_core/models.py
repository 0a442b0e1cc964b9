"""Shared value types used across the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EndpointKind(Enum):
    """Wire transport of a Gerrit remote; also selects the JSON schema."""

    SSH = "ssh"
    HTTP = "http"


class WorkspaceKind(Enum):
    GIT = "git"
    REPO = "repo"
    GIT_IN_REPO = "git-in-repo"

    @property
    def is_git(self) -> bool:
        return self is WorkspaceKind.GIT


class Action(Enum):
    """What to do with a fetched change."""

    CHECKOUT = "checkout"
    CHERRY_PICK = "cherry-pick"

    @property
    def label(self) -> str:
        return "Checkout" if self is Action.CHECKOUT else "Cherry pick"


@dataclass(frozen=True)
class SelectorItem:
    """One row handed to the item selector.

    display_text is shown in the list, preview_text on request, and
    output_token is what the pipeline gets back for a selected row.
    """

    display_text: str
    preview_text: str
    output_token: str
