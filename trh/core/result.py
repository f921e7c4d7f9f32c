"""Result type for best-effort operations.

Every call that touches the outside world (git, curl, node, the webhook, the
file system) returns a Result instead of raising. Callers decide whether a
failure is logged and skipped or ends the step.

Usage:
    match repo.previous_version_tag(exclude_head=False):
        case Ok(None):
            console.print("No previous version tag found")
        case Ok(tag):
            console.print(f"Since previous tag {tag}")
        case Err(error):
            console.warning(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Err", "Ok", "Result"]


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome carrying an error description."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
