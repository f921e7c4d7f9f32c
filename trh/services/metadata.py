"""Deploy metadata record.

One record per after-release run, written to `deploy-meta.json` and posted to
the deploy-event webhook. JSON shape:

    {
      "type": "git",
      "event": "commit" | "tag",
      "source": "https://github.com/owner/repo",
      "time": "2024-05-01 12:00:00",
      "branch" | "tag": "<ref name>",
      "file": "...", "fileDownload": "...",      (artifact found)
      "archiveName": "...", "archiveFile": "...", (archive configured)
      "pluginId": 1, "productId": 2              (manifest ids present)
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from trh.core.config import ArchiveConfig
from trh.core.event import EventMeta, GitRef
from trh.core.settings import release_download_url, source_url
from trh.services.artifacts import release_label

__all__ = [
    "DeployMetadata",
    "build_deploy_metadata",
    "event_name",
    "format_time",
]

DEPLOY_TYPE = "git"


def event_name(ref: GitRef) -> str:
    """Branch pushes are reported as "commit" events; other kinds as-is."""
    return "commit" if ref.kind == "branch" else ref.kind


def format_time(moment: datetime) -> str:
    """UTC, whole seconds, "YYYY-MM-DD HH:MM:SS"."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%d %H:%M:%S")


@dataclass(frozen=True, slots=True)
class DeployMetadata:
    event: str
    source: str
    time: str
    ref: GitRef
    file: str | None = None
    file_download: str | None = None
    archive_name: str | None = None
    archive_file: str | None = None
    plugin_id: int | None = None
    product_id: int | None = None

    def with_artifact(self, repo_full_name: str, file_name: str) -> DeployMetadata:
        return replace(
            self,
            file=file_name,
            file_download=release_download_url(
                repo_full_name, release_label(self.ref), file_name
            ),
        )

    def with_archive(self, archive: ArchiveConfig, repo_name: str) -> DeployMetadata:
        return replace(
            self,
            archive_name=archive.root or repo_name,
            archive_file=archive.dest_file_name or f"{repo_name}.zip",
        )

    def with_cloud_ids(self, *, plugin_id: int, product_id: int) -> DeployMetadata:
        return replace(self, plugin_id=plugin_id, product_id=product_id)

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "type": DEPLOY_TYPE,
            "event": self.event,
            "source": self.source,
            "time": self.time,
            self.ref.field_name: self.ref.name,
        }
        optional: tuple[tuple[str, object], ...] = (
            ("file", self.file),
            ("fileDownload", self.file_download),
            ("archiveName", self.archive_name),
            ("archiveFile", self.archive_file),
            ("pluginId", self.plugin_id),
            ("productId", self.product_id),
        )
        for key, value in optional:
            if value is not None:
                data[key] = value
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2) + "\n"


def build_deploy_metadata(event: EventMeta, now: datetime) -> DeployMetadata:
    """Base record with the fields every run has."""
    return DeployMetadata(
        event=event_name(event.ref),
        source=source_url(event.repo_full_name),
        time=format_time(now),
        ref=event.ref,
    )
