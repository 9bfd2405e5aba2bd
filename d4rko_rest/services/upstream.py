"""
GitHub-backed manifest source.

Lists the version directories of the package in the manifest repository and
downloads the singleton YAML manifest for each version. No retries are made;
a failed call fails the request, except for the contents API answering 403
(rate limited), which is reported as "no versions available".
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

import httpx
import yaml

from d4rko_rest.core.config import Settings
from d4rko_rest.domain.errors import ManifestNotFoundError, UpstreamError
from d4rko_rest.domain.models import PackageDocument
from d4rko_rest.domain.winget_utils import sort_versions_desc

logger = logging.getLogger(__name__)


class ManifestSource:
    """
    Reads version listings and singleton manifests from GitHub.

    ``transport`` lets callers swap the network layer (e.g. an
    ``httpx.MockTransport``) without touching the request logic.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    def _headers(self, api: bool) -> Dict[str, str]:
        headers = {"user-agent": self.settings.user_agent}
        if api:
            headers["accept"] = "application/vnd.github+json"
            if self.settings.github_token:
                headers["authorization"] = f"Bearer {self.settings.github_token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.settings.upstream_timeout,
            transport=self._transport,
        )

    # ========================================================================
    # Version listing
    # ========================================================================

    async def list_versions(self) -> List[str]:
        """
        Return the package versions, newest first.

        A 403 from GitHub (rate limiting) yields an empty list; any other
        non-success status raises ``UpstreamError``.
        """
        url = self.settings.contents_url
        logger.debug(f"Listing versions from {url}")

        async with self._client() as client:
            response = await client.get(url, headers=self._headers(api=True))

        if response.status_code == 403:
            logger.warning("GitHub API rate limited (403); reporting no versions")
            return []
        if not response.is_success:
            logger.error(f"GitHub API error listing versions: {response.status_code}")
            raise UpstreamError(f"GitHub API error: {response.status_code}", response.status_code)

        items = response.json()
        versions = [
            str(item["name"])
            for item in items
            if isinstance(item, dict) and item.get("type") == "dir" and "name" in item
        ]
        return sort_versions_desc(versions)

    # ========================================================================
    # Manifest loading
    # ========================================================================

    async def _fetch_manifest(self, client: httpx.AsyncClient, version: str) -> PackageDocument:
        url = self.settings.manifest_url(version)
        logger.debug(f"Downloading manifest from {url}")

        response = await client.get(url, headers=self._headers(api=False))
        if not response.is_success:
            logger.info(f"Manifest for {version} unavailable: {response.status_code}")
            raise ManifestNotFoundError(version, response.status_code)

        try:
            manifest = yaml.safe_load(response.text)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML manifest for {version}: {e}", exc_info=True)
            raise
        return PackageDocument.model_validate(manifest)

    async def load_manifest(self, version: str) -> PackageDocument:
        """
        Download and parse the singleton manifest for ``version``.

        Raises ``ManifestNotFoundError`` when the raw fetch does not succeed;
        YAML and validation errors propagate unchanged.
        """
        async with self._client() as client:
            return await self._fetch_manifest(client, version)

    async def load_manifests(self, versions: Sequence[str]) -> List[PackageDocument]:
        """
        Fetch several manifests concurrently.

        Results follow the order of ``versions``, not completion order.
        """
        if not versions:
            return []
        async with self._client() as client:
            documents = await asyncio.gather(
                *(self._fetch_manifest(client, v) for v in versions)
            )
        return list(documents)
