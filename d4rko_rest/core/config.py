"""
Process-wide configuration for the WinGet REST source.

The settings object is built once at startup and handed to every component.
Identity values (package identifier, publisher) are fixed; only the upstream
location and a few operational knobs can be overridden from the environment.
"""

from __future__ import annotations

import os
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


ENV_PREFIX = "D4RKO_REST_"


class Settings(BaseModel):
    """
    Immutable configuration shared by the upstream client, shaper and routes.
    """

    model_config = ConfigDict(frozen=True)

    # Upstream GitHub repository holding the singleton manifests
    owner: str = Field(default="0GMou", description="GitHub owner of the manifest repository.")
    repository: str = Field(default="D4RKO-WINGET", description="GitHub repository name.")
    branch: str = Field(default="main", description="Branch the raw manifests are read from.")
    manifest_base_dir: str = Field(
        default="manifests/d/d4rko/d4rko.mpv",
        description="Directory whose sub-directories are the package versions.",
    )
    github_api_url: str = Field(default="https://api.github.com")
    raw_content_url: str = Field(default="https://raw.githubusercontent.com")
    github_token: Optional[str] = Field(
        default=None,
        description="Optional token sent to the contents API to lift anonymous rate limits.",
    )
    user_agent: str = Field(default="d4rko-rest")
    upstream_timeout: float = Field(default=30.0, gt=0)

    # Served package identity
    package_identifier: str = Field(default="d4rko.mpv")
    publisher: str = Field(default="D4RKO")
    default_package_name: str = Field(default="MPV")
    default_package_locale: str = Field(default="en-US")

    # WinGet REST contract
    source_identifier: str = Field(default="D4RKO-WINGET")
    server_supported_versions: Tuple[str, ...] = Field(
        default=(
            "1.0.0", "1.1.0", "1.2.0", "1.3.0", "1.4.0",
            "1.5.0", "1.6.0", "1.7.0", "1.8.0", "1.9.0",
        ),
        description="WinGet REST contract versions advertised by /information.",
    )
    cache_max_age: int = Field(default=120, ge=0)

    @property
    def contents_url(self) -> str:
        """GitHub contents API URL listing the version directories."""
        return (
            f"{self.github_api_url}/repos/{self.owner}/{self.repository}"
            f"/contents/{self.manifest_base_dir}"
        )

    def manifest_url(self, version: str) -> str:
        """Raw URL of the singleton manifest for ``version``."""
        return (
            f"{self.raw_content_url}/{self.owner}/{self.repository}/{self.branch}"
            f"/{self.manifest_base_dir}/{version}/{self.package_identifier}.yaml"
        )

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.cache_max_age}"


def load_settings() -> Settings:
    """
    Build settings from defaults plus ``D4RKO_REST_*`` environment overrides.
    """
    overrides = {}
    for field_name in ("owner", "repository", "branch", "github_token"):
        value = os.environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value:
            overrides[field_name] = value

    max_age = os.environ.get(f"{ENV_PREFIX}CACHE_MAX_AGE")
    if max_age:
        overrides["cache_max_age"] = int(max_age)

    timeout = os.environ.get(f"{ENV_PREFIX}UPSTREAM_TIMEOUT")
    if timeout:
        overrides["upstream_timeout"] = float(timeout)

    return Settings(**overrides)


def get_log_level() -> str:
    return os.environ.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").upper()
