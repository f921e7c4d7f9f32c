"""Process and filesystem primitives."""

from .files import atomic_write_text, truncate_text
from .process import ProcessError, run

__all__ = [
    "ProcessError",
    "atomic_write_text",
    "run",
    "truncate_text",
]
