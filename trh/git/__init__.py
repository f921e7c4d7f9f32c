"""Git operations used by the release steps."""

from .repository import Commit, GitError, Repository, is_version_tag

__all__ = [
    "Commit",
    "GitError",
    "Repository",
    "is_version_tag",
]
