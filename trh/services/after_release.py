"""After-release step.

- Build deploy metadata for the event (and the renamed artifact, if any)
- Upload the artifact to the cloud service when the manifest has cloud ids
- Write `deploy-meta.json` and post it to the deploy-event webhook

Every step except writing `deploy-meta.json` is best-effort: failures are
logged and the next step still runs.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import partial
from pathlib import Path

from trh.core.config import load_project_config
from trh.core.event import EventMeta, read_event_meta
from trh.core.result import Err, Ok, Result
from trh.core.settings import (
    CHANGELOG_FILE,
    CHANGELOG_PLACEHOLDER,
    DEPLOY_META_FILE,
    MANIFEST_FILE,
    PUBLISH_DIR,
    HookSettings,
)
from trh.output.console import ConsoleProtocol, Style
from trh.platform.files import atomic_write_text
from trh.services.artifacts import find_release_artifact
from trh.services.errors import ReleaseError
from trh.services.manifest import CloudIds, load_changelog, load_cloud_ids
from trh.services.metadata import DeployMetadata, build_deploy_metadata
from trh.services.slug import slugify
from trh.services.upload import UploadError, UploadRequest, upload_artifact
from trh.tools.http import HttpClient, HttpError, HttpResponse, RealHttpClient

__all__ = ["AfterReleaseOutcome", "Uploader", "run_after_release"]

Uploader = Callable[[UploadRequest], Result[str, UploadError]]


@dataclass(frozen=True, slots=True)
class AfterReleaseOutcome:
    event: EventMeta
    metadata: DeployMetadata
    deploy_meta_path: Path
    artifact: Path | None
    upload: Result[str, UploadError] | None
    post: Result[HttpResponse, HttpError]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _read_cloud_ids(project_path: Path, console: ConsoleProtocol) -> CloudIds | None:
    result = load_cloud_ids(project_path / MANIFEST_FILE)
    if isinstance(result, Err):
        console.print(result.error.message, Style.DIM)
        return None
    return result.value


def _read_changelog(project_path: Path, console: ConsoleProtocol) -> str:
    result = load_changelog(project_path / CHANGELOG_FILE)
    if isinstance(result, Err):
        console.print(result.error.message, Style.DIM)
        return CHANGELOG_PLACEHOLDER
    return result.value


def _upload(
    *,
    uploader: Uploader,
    artifact: Path | None,
    ids: CloudIds,
    event: EventMeta,
    changelog: str,
    slug_source: str,
    console: ConsoleProtocol,
) -> Result[str, UploadError]:
    if artifact is None:
        result: Result[str, UploadError] = Err(UploadError("No release artifact to upload"))
    else:
        console.print(f"Upload {artifact.name} to cloud (plugin {ids.plugin_id})")
        result = uploader(
            UploadRequest(
                file=artifact,
                ids=ids,
                version=event.git_ref_name if event.ref.is_tag else "unknown",
                changelog=changelog,
                slug=slugify(slug_source),
            )
        )

    match result:
        case Ok(body):
            console.success("Cloud upload done")
            if body.strip():
                console.print(body.strip(), Style.DIM)
        case Err(error):
            console.warning(f"Cloud upload failed: {error}")
    return result


def _post(
    http: HttpClient,
    url: str,
    metadata: DeployMetadata,
    console: ConsoleProtocol,
) -> Result[HttpResponse, HttpError]:
    result = http.post_json(url, metadata.to_dict())
    match result:
        case Ok(response):
            console.print(f"Response {response.status} {response.reason}")
            console.print(response.body)
        case Err(error):
            console.warning(f"Deploy event not sent: {error}")
    return result


def run_after_release(
    project_path: Path,
    *,
    console: ConsoleProtocol,
    env: Mapping[str, str] | None = None,
    settings: HookSettings | None = None,
    http: HttpClient | None = None,
    clock: Callable[[], datetime] = _utc_now,
    uploader: Uploader | None = None,
) -> Result[AfterReleaseOutcome, ReleaseError]:
    """Publish deploy metadata for the current event.

    Args:
        project_path: Project root (the CI working directory).
        console: Output sink.
        env: Environment for event context and settings (defaults to os.environ).
        settings: Endpoint settings (defaults to HookSettings.from_env(env)).
        http: Client for the webhook POST (defaults to RealHttpClient()).
        clock: Current time source.
        uploader: Cloud upload function (defaults to curl via upload_artifact).

    Returns:
        Ok(outcome) once deploy-meta.json is written, whatever happened to
        the upload and the webhook. Err only if the file cannot be written.
    """
    console.header("After release")

    hook_settings = settings if settings is not None else HookSettings.from_env(env)
    client = http if http is not None else RealHttpClient()
    upload_fn: Uploader = (
        uploader
        if uploader is not None
        else partial(upload_artifact, url=hook_settings.upload_url, cwd=project_path)
    )

    publish_dir = project_path / PUBLISH_DIR
    deploy_meta_path = project_path / DEPLOY_META_FILE

    event = read_event_meta(env)
    config = load_project_config(project_path)

    ids = _read_cloud_ids(project_path, console)
    changelog = _read_changelog(project_path, console)

    metadata = build_deploy_metadata(event, clock())

    artifact = find_release_artifact(publish_dir, event.ref)
    if artifact is not None:
        console.print(f"Release file {artifact.name}")
        metadata = metadata.with_artifact(event.repo_full_name, artifact.name)
    else:
        console.print("Release file not found", Style.DIM)

    if config is not None and config.archive is not None:
        metadata = metadata.with_archive(config.archive, event.repo_name)

    upload: Result[str, UploadError] | None = None
    if ids is not None:
        metadata = metadata.with_cloud_ids(plugin_id=ids.plugin_id, product_id=ids.product_id)
        upload = _upload(
            uploader=upload_fn,
            artifact=artifact,
            ids=ids,
            event=event,
            changelog=changelog,
            slug_source=metadata.archive_name or event.repo_name,
            console=console,
        )

    console.data(metadata.to_dict())
    console.newline()

    try:
        atomic_write_text(deploy_meta_path, metadata.to_json())
    except OSError as e:
        return Err(
            ReleaseError(
                kind="write_failed",
                message=f"failed to write deploy metadata: {e}",
                hint=str(deploy_meta_path),
            )
        )
    console.print(f"Wrote {deploy_meta_path}")

    post = _post(client, hook_settings.deploy_event_url, metadata, console)

    return Ok(
        AfterReleaseOutcome(
            event=event,
            metadata=metadata,
            deploy_meta_path=deploy_meta_path,
            artifact=artifact,
            upload=upload,
            post=post,
        )
    )
