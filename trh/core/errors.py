"""Process exit codes for the release hook entry points.

The hooks only fail on paths that cannot be skipped (renaming the artifact,
writing release notes or deploy metadata); everything else is logged and the
step continues.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes returned to the CI runner.

    These values are used as process exit codes and should remain stable.
    """

    IO_ERROR = 5
