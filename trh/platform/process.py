"""Run git and curl, reporting failure as a value.

The release steps never let a subprocess exception escape: a missing binary,
a timeout and a non-zero exit all come back as ProcessError.

    match run(["git", "describe", "--tags", "--abbrev=0"], cwd=project_path):
        case Ok(stdout):
            tag = stdout.strip()
        case Err(error):
            console.warning(error.diagnostic)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from trh.core.result import Err, Ok, Result

__all__ = ["NOT_RUN", "ProcessError", "run"]

# Exit code recorded when the process never finished on its own.
NOT_RUN = -1

_SUMMARY_ARGS = 3


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that did not exit 0.

    Attributes:
        command: argv as executed.
        returncode: Exit status, or NOT_RUN for spawn failures and timeouts.
        stdout: Captured output, possibly partial.
        stderr: Captured error output, or the spawn/timeout reason.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:_SUMMARY_ARGS])
        if len(self.command) > _SUMMARY_ARGS:
            shown = f"{shown} ..."
        return f"{shown} failed (exit {self.returncode})"

    @property
    def diagnostic(self) -> str:
        """stderr, else stdout, else the one-line summary."""
        return self.stderr.strip() or self.stdout.strip() or str(self)


def _not_run(cmd: list[str], reason: str, stdout: str = "") -> Err[ProcessError]:
    return Err(ProcessError(tuple(cmd), NOT_RUN, stdout, reason))


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run cmd in cwd with output captured as text.

    Args:
        cmd: argv.
        cwd: Working directory.
        env: Full environment, or None to inherit ours.
        timeout: Seconds before the process is killed (None waits forever).

    Returns:
        Ok(stdout) when the exit status is 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _not_run(cmd, f"Command timed out after {timeout}s", partial)
    except OSError as e:
        return _not_run(cmd, str(e))

    if proc.returncode == 0:
        return Ok(proc.stdout)
    return Err(ProcessError(tuple(cmd), proc.returncode, proc.stdout, proc.stderr))
