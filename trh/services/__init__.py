"""Release step services."""

from .after_release import AfterReleaseOutcome, run_after_release
from .before_release import BeforeReleaseOutcome, run_before_release
from .errors import ReleaseError

__all__ = [
    "AfterReleaseOutcome",
    "BeforeReleaseOutcome",
    "ReleaseError",
    "run_after_release",
    "run_before_release",
]
