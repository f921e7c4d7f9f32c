from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "rename_failed",
    "write_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """A failure that ends a release step.

    Everything else the steps run into (missing config, git or network
    failures) is logged and skipped instead.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
