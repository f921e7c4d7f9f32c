"""Git event context read from the CI environment.

The CI runner describes the triggering event with GitHub-style default
environment variables:

    GITHUB_REPOSITORY   owner/repo
    GITHUB_REF_TYPE     branch | tag
    GITHUB_REF          refs/heads/<branch> | refs/tags/<tag> | refs/pull/<n>/merge
    GITHUB_REF_NAME     short branch or tag name

Reading never fails: missing variables fall back to empty strings, an
"unknown" ref name, and the "unknown" ref kind.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

__all__ = [
    "DEFAULT_BRANCHES",
    "EventMeta",
    "GitRef",
    "RefKind",
    "read_event_meta",
]

RefKind = Literal["branch", "tag", "unknown"]

DEFAULT_BRANCHES: frozenset[str] = frozenset({"main", "master"})

_UNKNOWN_REF_NAME = "unknown"


@dataclass(frozen=True, slots=True)
class GitRef:
    """A branch or tag pointer.

    The kind decides which JSON key carries the name in deploy metadata.
    Refs of unknown kind (misconfigured environment) use a neutral "ref" key
    instead of a key named after whatever string the environment held.
    For naming and release notes they behave like branches, so an unknown
    ref called main or master is the default branch.
    """

    kind: RefKind
    name: str

    @property
    def field_name(self) -> str:
        if self.kind == "unknown":
            return "ref"
        return self.kind

    @property
    def is_tag(self) -> bool:
        return self.kind == "tag"

    @property
    def is_default_branch(self) -> bool:
        return self.kind != "tag" and self.name in DEFAULT_BRANCHES


@dataclass(frozen=True, slots=True)
class EventMeta:
    """Event context for one hook invocation."""

    repo_full_name: str
    git_ref: str
    ref: GitRef

    @property
    def event_type(self) -> RefKind:
        return self.ref.kind

    @property
    def git_ref_name(self) -> str:
        return self.ref.name

    @property
    def repo_name(self) -> str:
        """Repository name without the owner ("owner/repo" -> "repo")."""
        return self.repo_full_name.rsplit("/", 1)[-1]


def _ref_kind(value: str) -> RefKind:
    match value.strip().lower():
        case "branch":
            return "branch"
        case "tag":
            return "tag"
        case _:
            return "unknown"


def read_event_meta(env: Mapping[str, str] | None = None) -> EventMeta:
    """Build EventMeta from environment variables.

    Args:
        env: Environment mapping (defaults to os.environ).

    Returns:
        EventMeta with defaults substituted for anything missing.
    """
    source = os.environ if env is None else env

    ref_name = source.get("GITHUB_REF_NAME", "").strip() or _UNKNOWN_REF_NAME

    return EventMeta(
        repo_full_name=source.get("GITHUB_REPOSITORY", "").strip(),
        git_ref=source.get("GITHUB_REF", "").strip(),
        ref=GitRef(kind=_ref_kind(source.get("GITHUB_REF_TYPE", "")), name=ref_name),
    )
