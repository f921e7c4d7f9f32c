"""Error presentation for release step failures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from trh.core.errors import ErrorCode
from trh.output.console import Style

if TYPE_CHECKING:
    from trh.output.console import ConsoleProtocol
    from trh.services.errors import ReleaseError

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "rename_failed" | "write_failed":
            return int(ErrorCode.IO_ERROR)
