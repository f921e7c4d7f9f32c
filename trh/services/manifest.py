"""Project manifest and changelog, read for the cloud upload.

`package.json` may carry the cloud identifiers of the plugin:

    {"cloud": {"pluginId": 12, "productId": 34}}

Both are required for an upload; the changelog is sent along as text.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from trh.core.result import Err, Ok, Result
from trh.core.structured import as_str_dict, get_int, get_table

__all__ = [
    "CloudIds",
    "ManifestError",
    "load_changelog",
    "load_cloud_ids",
]


@dataclass(frozen=True, slots=True)
class ManifestError:
    message: str
    path: Path


@dataclass(frozen=True, slots=True)
class CloudIds:
    plugin_id: int
    product_id: int


def load_cloud_ids(path: Path) -> Result[CloudIds, ManifestError]:
    """Read cloud.pluginId / cloud.productId from a JSON manifest."""
    try:
        data_obj: object = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(ManifestError(f"Manifest not found: {path}", path=path))
    except json.JSONDecodeError as e:
        return Err(ManifestError(f"Invalid JSON in manifest: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ManifestError(f"Error reading manifest: {e}", path=path))

    data = as_str_dict(data_obj)
    cloud = get_table(data, "cloud") if data is not None else None
    if cloud is None:
        return Err(ManifestError("Manifest has no cloud section", path=path))

    plugin_id = get_int(cloud, "pluginId")
    product_id = get_int(cloud, "productId")
    if plugin_id is None or product_id is None:
        return Err(ManifestError("Manifest cloud section needs pluginId and productId", path=path))

    return Ok(CloudIds(plugin_id=plugin_id, product_id=product_id))


def load_changelog(path: Path) -> Result[str, ManifestError]:
    """Read the changelog verbatim."""
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(ManifestError(f"Changelog not found: {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ManifestError(f"Error reading changelog: {e}", path=path))
