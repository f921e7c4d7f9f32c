"""Best-effort artifact upload to the cloud service.

The transfer is delegated to curl as a multipart form POST. The result comes
back as a value; the caller logs it and carries on with the release.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from trh.core.result import Err, Ok, Result
from trh.core.settings import UPLOAD_TIMEOUT_SECONDS
from trh.platform.process import run as run_process
from trh.services.manifest import CloudIds

__all__ = [
    "UploadError",
    "UploadRequest",
    "build_curl_command",
    "upload_artifact",
]


@dataclass(frozen=True, slots=True)
class UploadError:
    message: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


@dataclass(frozen=True, slots=True)
class UploadRequest:
    file: Path
    ids: CloudIds
    version: str
    changelog: str
    slug: str


def build_curl_command(request: UploadRequest, url: str) -> list[str]:
    """curl argv for the multipart upload.

    Only the artifact goes through `-F` (where `@` and `<` read files). Every
    other field is sent with `--form-string`, so a tag or changelog starting
    with those characters is sent as text.
    """
    fields = (
        ("product_id", str(request.ids.product_id)),
        ("plugin_id", str(request.ids.plugin_id)),
        ("version", request.version),
        ("changelog", request.changelog),
        ("slug", request.slug),
    )
    cmd = ["curl", "-sS", "--fail-with-body", "-X", "POST", "-F", f"file=@{request.file}"]
    for name, value in fields:
        cmd += ["--form-string", f"{name}={value}"]
    cmd.append(url)
    return cmd


def upload_artifact(request: UploadRequest, *, url: str, cwd: Path) -> Result[str, UploadError]:
    """Upload the artifact and return the response body.

    Returns:
        Ok(response text) on success, Err(UploadError) when the file is
        missing or curl fails (including HTTP error statuses).
    """
    if not request.file.is_file():
        return Err(UploadError("Artifact file not found", detail=str(request.file)))

    result = run_process(
        build_curl_command(request, url),
        cwd=cwd,
        timeout=UPLOAD_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(UploadError(str(result.error), detail=result.error.diagnostic))
    return Ok(result.value)
