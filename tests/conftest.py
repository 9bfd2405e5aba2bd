"""Shared fixtures for the WinGet REST source tests."""

import json

import httpx
import pytest

from d4rko_rest.core.config import Settings
from d4rko_rest.services.upstream import ManifestSource

MANIFESTS = {
    "1.2.3": """
PackageIdentifier: d4rko.mpv
PackageVersion: 1.2.3
PackageLocale: en-US
Publisher: D4RKO
PackageName: MPV
License: GPL-2.0
ShortDescription: Media player
Tags:
  - video
  - player
InstallerType: zip
NestedInstallerType: portable
NestedInstallerFiles:
  - RelativeFilePath: mpv.exe
    PortableCommandAlias: mpv
Installers:
  - Architecture: x64
    InstallerUrl: https://example.com/mpv-x64.zip
    InstallerSha256: AAAA
  - Architecture: x86
    InstallerUrl: https://example.com/mpv-x86.zip
    InstallerSha256: BBBB
    Scope: user
  - Architecture: arm64
    InstallerType: exe
    InstallerUrl: https://example.com/mpv-arm64.exe
    InstallerSha256: CCCC
ManifestType: singleton
ManifestVersion: 1.9.0
""",
    "1.10.0": """
PackageIdentifier: d4rko.mpv
PackageVersion: 1.10.0
PackageName: MPV Player
Installers:
  - Architecture: x64
    InstallerType: zip
    InstallerUrl: https://example.com/mpv-1.10.zip
    InstallerSha256: DDDD
""",
}

CONTENTS = [
    {"name": "1.2.3", "type": "dir"},
    {"name": "README.md", "type": "file"},
    {"name": "1.10.0", "type": "dir"},
]


@pytest.fixture
def settings():
    return Settings()


def make_transport(settings, contents=None, manifests=None, contents_status=200, calls=None):
    """
    Mock GitHub: the contents API lists ``contents``; the raw host serves
    ``manifests`` keyed by version and 404s everything else.
    """
    contents = CONTENTS if contents is None else contents
    manifests = MANIFESTS if manifests is None else manifests

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if calls is not None:
            calls.append(request)
        if url == settings.contents_url:
            if contents_status != 200:
                return httpx.Response(contents_status, json={"message": "error"})
            return httpx.Response(200, content=json.dumps(contents))
        for version, text in manifests.items():
            if url == settings.manifest_url(version):
                return httpx.Response(200, text=text)
        return httpx.Response(404, text="404: Not Found")

    return httpx.MockTransport(handler)


@pytest.fixture
def source(settings):
    return ManifestSource(settings, transport=make_transport(settings))


@pytest.fixture
def transport_factory(settings):
    def factory(**kwargs):
        return make_transport(settings, **kwargs)
    return factory
