"""Fixed paths, hosts and endpoints used by the release hooks.

Endpoints can be overridden from the environment; everything else is a
constant shared by both steps so they agree on where files live.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal

__all__ = [
    "CHANGELOG_FILE",
    "CHANGELOG_PLACEHOLDER",
    "CLOUD_UPLOAD_URL",
    "CONFIG_EVAL_TIMEOUT_SECONDS",
    "DEPLOY_EVENT_URL",
    "DEPLOY_EVENT_URL_TEST",
    "DEPLOY_META_FILE",
    "DeployMode",
    "GIT_TIMEOUT_SECONDS",
    "HTTP_TIMEOUT_SECONDS",
    "HookSettings",
    "MANIFEST_FILE",
    "PUBLISH_DIR",
    "RELEASE_NOTES_FILE",
    "SOURCE_HOST",
    "UPLOAD_TIMEOUT_SECONDS",
    "commit_url",
    "release_download_url",
    "source_url",
]

# Project layout
PUBLISH_DIR = "publish"
RELEASE_NOTES_FILE = "release.md"  # inside PUBLISH_DIR
DEPLOY_META_FILE = "deploy-meta.json"
MANIFEST_FILE = "package.json"
CHANGELOG_FILE = "changelog.md"
CHANGELOG_PLACEHOLDER = "No changelog"

# Remote services
SOURCE_HOST = "github.com"
DEPLOY_EVENT_URL = "https://api.tangible.one"
DEPLOY_EVENT_URL_TEST = "http://localhost:3333"
CLOUD_UPLOAD_URL = "https://cloud.tangible.one/api/plugin/upload"

# Timeouts
CONFIG_EVAL_TIMEOUT_SECONDS = 30.0
GIT_TIMEOUT_SECONDS = 30.0
HTTP_TIMEOUT_SECONDS = 30.0
UPLOAD_TIMEOUT_SECONDS = 5 * 60.0

DeployMode = Literal["production", "test"]


@dataclass(frozen=True, slots=True)
class HookSettings:
    """Endpoint selection for one invocation."""

    mode: DeployMode = "production"
    deploy_event_url: str = DEPLOY_EVENT_URL
    upload_url: str = CLOUD_UPLOAD_URL

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> HookSettings:
        """Create settings from DEPLOY_ENV / DEPLOY_EVENT_URL / CLOUD_UPLOAD_URL."""
        source = os.environ if env is None else env

        mode: DeployMode = (
            "test" if source.get("DEPLOY_ENV", "").strip().lower() == "test" else "production"
        )
        default_event_url = DEPLOY_EVENT_URL_TEST if mode == "test" else DEPLOY_EVENT_URL

        return cls(
            mode=mode,
            deploy_event_url=source.get("DEPLOY_EVENT_URL", "").strip() or default_event_url,
            upload_url=source.get("CLOUD_UPLOAD_URL", "").strip() or CLOUD_UPLOAD_URL,
        )


def source_url(repo_full_name: str) -> str:
    """Hosted repository URL."""
    return f"https://{SOURCE_HOST}/{repo_full_name}"


def commit_url(repo_full_name: str, sha: str) -> str:
    return f"{source_url(repo_full_name)}/commit/{sha}"


def release_download_url(repo_full_name: str, release: str, file_name: str) -> str:
    """Download URL of a release asset; release is a tag or "latest"."""
    return f"{source_url(repo_full_name)}/releases/download/{release}/{file_name}"
