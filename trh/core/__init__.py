"""Core domain types and logic."""

from .config import ArchiveConfig, ConfigError, ProjectConfig, load_project_config
from .errors import ErrorCode
from .event import EventMeta, GitRef, read_event_meta
from .result import Err, Ok, Result
from .settings import HookSettings

__all__ = [
    # config
    "ArchiveConfig",
    "ConfigError",
    "ProjectConfig",
    "load_project_config",
    # errors
    "ErrorCode",
    # event
    "EventMeta",
    "GitRef",
    "read_event_meta",
    # result
    "Err",
    "Ok",
    "Result",
    # settings
    "HookSettings",
]
