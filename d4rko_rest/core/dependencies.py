from typing import Optional

from d4rko_rest.core.config import Settings, load_settings
from d4rko_rest.services.upstream import ManifestSource

_settings: Optional[Settings] = None
_manifest_source: Optional[ManifestSource] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_manifest_source() -> ManifestSource:
    global _manifest_source
    if _manifest_source is None:
        _manifest_source = ManifestSource(get_settings())
    return _manifest_source
