"""Project configuration loading.

A project ships a `tangible.config.js` next to its sources describing how its
release archive is named:

    export default {
      archive: {
        root: 'example-plugin',             // base name / root folder in the zip
        dest: 'publish/example-plugin.zip', // explicit output zip
      },
    }

The module is evaluated with node and its default export (or module.exports)
read back as JSON. Projects without node can ship the same shape as
`tangible.config.toml` or `tangible.config.json` instead.

The file is optional. Absence, a failed evaluation, bad syntax and wrong
shape all mean "no project config", which the release steps treat as a
normal state.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .result import Err, Ok, Result
from .settings import CONFIG_EVAL_TIMEOUT_SECONDS
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "ArchiveConfig",
    "CONFIG_FILE_NAMES",
    "ConfigError",
    "ProjectConfig",
    "find_config_file",
    "load_project_config",
    "load_project_config_result",
    "node_loader_command",
]

# First existing file wins.
CONFIG_FILE_NAMES: tuple[str, ...] = (
    "tangible.config.js",
    "tangible.config.toml",
    "tangible.config.json",
)

# Imports the module given as argv[1] (a file URL) and prints its config as JSON.
_NODE_LOADER = (
    "const m = await import(process.argv[1]);"
    "process.stdout.write(JSON.stringify(m.default ?? m) ?? 'null');"
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the project config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ArchiveConfig:
    """Archive naming rules."""

    dest: str | None = None
    root: str | None = None

    @property
    def dest_file_name(self) -> str | None:
        """Final path segment of dest ("publish/x.zip" -> "x.zip")."""
        if self.dest is None:
            return None
        name = PurePosixPath(self.dest.replace("\\", "/")).name
        return name or None

    @property
    def source_zip_name(self) -> str | None:
        """File name of the zip produced by the build, if it can be derived."""
        if self.root is not None:
            return f"{self.root}.zip"
        return self.dest_file_name


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Project config container. Every field is optional."""

    archive: ArchiveConfig | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ProjectConfig:
        """Create ProjectConfig from a parsed TOML/JSON mapping."""
        archive: StrDict | None = get_table(data, "archive")
        if archive is None:
            return cls()
        return cls(
            archive=ArchiveConfig(
                dest=get_str(archive, "dest"),
                root=get_str(archive, "root"),
            )
        )


def find_config_file(project_path: Path) -> Path | None:
    """Return the first existing config file in project_path."""
    for name in CONFIG_FILE_NAMES:
        candidate = project_path / name
        if candidate.is_file():
            return candidate
    return None


def node_loader_command(path: Path) -> list[str]:
    """node argv that evaluates a JS config module and prints it as JSON."""
    return [
        "node",
        "--input-type=module",
        "-e",
        _NODE_LOADER,
        path.resolve().as_uri(),
    ]


def _evaluate_js(path: Path) -> Result[object, ConfigError]:
    # trh.platform imports trh.core, so the runner is imported on use.
    from trh.platform.process import run

    result = run(node_loader_command(path), cwd=path.parent, timeout=CONFIG_EVAL_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ConfigError(f"Could not evaluate {path.name}: {result.error.diagnostic}", path=path)
        )
    try:
        return Ok(json.loads(result.value))
    except json.JSONDecodeError as e:
        return Err(ConfigError(f"Config module did not export JSON data: {e}", path=path))


def _read_declarative(path: Path) -> Result[object, ConfigError]:
    import tomllib

    try:
        text = path.read_text(encoding="utf-8")
        data_obj: object = (
            tomllib.loads(text) if path.suffix == ".toml" else json.loads(text)
        )
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except json.JSONDecodeError as e:
        return Err(ConfigError(f"Invalid JSON syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))
    return Ok(data_obj)


def _parse(path: Path) -> Result[StrDict, ConfigError]:
    loaded = _evaluate_js(path) if path.suffix == ".js" else _read_declarative(path)
    if isinstance(loaded, Err):
        return loaded

    data = as_str_dict(loaded.value)
    if data is None:
        return Err(ConfigError("Config root must be a table/object", path=path))
    return Ok(data)


def load_project_config_result(project_path: Path) -> Result[ProjectConfig, ConfigError]:
    """Load the project config, reporting why it could not be loaded.

    Args:
        project_path: Project root directory.

    Returns:
        Ok(ProjectConfig) on success, Err(ConfigError) otherwise.
    """
    path = find_config_file(project_path)
    if path is None:
        names = ", ".join(CONFIG_FILE_NAMES)
        return Err(ConfigError(f"Config file not found ({names})", path=project_path))

    parsed = _parse(path)
    if isinstance(parsed, Err):
        return parsed

    try:
        return Ok(ProjectConfig.from_dict(parsed.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_project_config(project_path: Path) -> ProjectConfig | None:
    """Load the project config, or None if there is no usable config."""
    result = load_project_config_result(project_path)
    if isinstance(result, Ok):
        return result.value
    return None
