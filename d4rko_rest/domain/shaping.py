"""
Response shaping for the WinGet REST endpoints.

Every function here is pure: it takes parsed singleton manifests (and the
process settings) and returns plain dicts ready for JSON encoding.

WinGet clients validate field presence strictly, so optional fields are
copied only when the source document carries them. Absent values are never
emitted as ``null`` or ``""``; an upstream empty list (e.g. ``Tags: []``) is
a present value and is kept.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Sequence

from d4rko_rest.core.config import Settings
from d4rko_rest.domain.models import NestedInstallerFile, PackageDocument
from d4rko_rest.domain.winget_utils import compare_versions, put_if_present

# Locale fields copied verbatim when present on the document.
OPTIONAL_LOCALE_FIELDS = (
    "PublisherUrl",
    "PublisherSupportUrl",
    "PrivacyUrl",
    "Author",
    "PackageUrl",
    "License",
    "LicenseUrl",
    "Copyright",
    "CopyrightUrl",
    "ShortDescription",
    "Description",
    "Moniker",
    "Tags",
    "ReleaseNotes",
    "ReleaseNotesUrl",
)


# ---------------------------------------------------------------------------
# Installers
# ---------------------------------------------------------------------------


def installer_identifier(doc: PackageDocument, ordinal: int) -> str:
    return f"{doc.PackageIdentifier}-{doc.PackageVersion}-{ordinal}"


def _nested_files(files: Optional[List[NestedInstallerFile]]) -> Optional[List[Dict[str, Any]]]:
    if files is None:
        return None
    result = []
    for f in files:
        item: Dict[str, Any] = {"RelativeFilePath": f.RelativeFilePath}
        put_if_present(item, "PortableCommandAlias", f.PortableCommandAlias)
        result.append(item)
    return result


def to_installers(doc: PackageDocument) -> List[Dict[str, Any]]:
    """
    Build the Installer objects for one manifest, in manifest order.

    InstallerIdentifier is synthesized as ``{id}-{version}-{n}`` (1-based).
    InstallerType, NestedInstallerType and NestedInstallerFiles use the
    entry's value, then the document-level value, else are omitted.
    """
    installers: List[Dict[str, Any]] = []
    for idx, entry in enumerate(doc.Installers or [], start=1):
        item: Dict[str, Any] = {"InstallerIdentifier": installer_identifier(doc, idx)}
        put_if_present(item, "Architecture", entry.Architecture)
        put_if_present(item, "InstallerSha256", entry.InstallerSha256)
        put_if_present(item, "InstallerUrl", entry.InstallerUrl)

        installer_type = entry.InstallerType if entry.InstallerType is not None else doc.InstallerType
        nested_type = (
            entry.NestedInstallerType
            if entry.NestedInstallerType is not None
            else doc.NestedInstallerType
        )
        nested_files = (
            entry.NestedInstallerFiles
            if entry.NestedInstallerFiles is not None
            else doc.NestedInstallerFiles
        )

        put_if_present(item, "InstallerType", installer_type)
        put_if_present(item, "NestedInstallerType", nested_type)
        put_if_present(item, "NestedInstallerFiles", _nested_files(nested_files))
        put_if_present(item, "Scope", entry.Scope)
        put_if_present(item, "InstallerLocale", entry.InstallerLocale)
        installers.append(item)
    return installers


# ---------------------------------------------------------------------------
# Locales
# ---------------------------------------------------------------------------


def _locale_fields(doc: PackageDocument, settings: Settings) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "Publisher": doc.Publisher or settings.publisher,
        "PackageName": doc.PackageName or settings.default_package_name,
    }
    for name in OPTIONAL_LOCALE_FIELDS:
        value = getattr(doc, name)
        if isinstance(value, list):
            value = list(value)
        put_if_present(fields, name, value)
    return fields


def build_default_locale(doc: PackageDocument, settings: Settings) -> Dict[str, Any]:
    """DefaultLocale object; always present, even for sparse manifests."""
    locale: Dict[str, Any] = {
        "PackageLocale": doc.PackageLocale or settings.default_package_locale,
    }
    locale.update(_locale_fields(doc, settings))
    return locale


def to_locales(doc: PackageDocument, settings: Settings) -> Optional[List[Dict[str, Any]]]:
    """
    Locale list for a manifest, or ``None`` when it has no PackageLocale.

    ``None`` lets callers tell "no locale block" apart from an empty list:
    list endpoints send ``[]``, manifest endpoints omit ``Locales``.
    """
    if doc.PackageLocale is None:
        return None
    locale: Dict[str, Any] = {"PackageLocale": doc.PackageLocale}
    locale.update(_locale_fields(doc, settings))
    return [locale]


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


def version_entry(doc: PackageDocument, settings: Settings) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "PackageVersion": doc.PackageVersion,
        "DefaultLocale": build_default_locale(doc, settings),
        "Installers": to_installers(doc),
    }
    put_if_present(entry, "Locales", to_locales(doc, settings))
    return entry


def version_detail(doc: PackageDocument, settings: Settings) -> Dict[str, Any]:
    """Version object for ``/packages/{id}/versions/{ver}``."""
    return {
        "PackageVersion": doc.PackageVersion,
        "DefaultLocale": build_default_locale(doc, settings),
    }


def manifest_single(
    package_identifier: str,
    documents: Sequence[PackageDocument],
    settings: Settings,
) -> Dict[str, Any]:
    """One package record with a Versions entry per document, order kept."""
    return {
        "PackageIdentifier": package_identifier,
        "Versions": [version_entry(doc, settings) for doc in documents],
    }


def manifest_multiple(
    documents: Sequence[PackageDocument],
    settings: Settings,
) -> List[Dict[str, Any]]:
    """
    One top-level package record per document.

    Used by the list-all endpoint only; records are not grouped by
    identifier the way ``manifest_single`` groups them.
    """
    return [
        {
            "PackageIdentifier": doc.PackageIdentifier,
            "Versions": [version_entry(doc, settings)],
        }
        for doc in documents
    ]


# ---------------------------------------------------------------------------
# Search, packages and information
# ---------------------------------------------------------------------------


def search_result(
    versions: Sequence[str],
    package_name: str,
    settings: Settings,
) -> List[Dict[str, Any]]:
    """The single ManifestSearchResponse record this source can return."""
    return [
        {
            "PackageIdentifier": settings.package_identifier,
            "PackageName": package_name,
            "Publisher": settings.publisher,
            "Versions": [{"PackageVersion": v} for v in versions],
        }
    ]


def package_record(settings: Settings) -> Dict[str, Any]:
    return {"PackageIdentifier": settings.package_identifier}


def version_list(versions: Sequence[str]) -> List[Dict[str, Any]]:
    return [{"PackageVersion": v} for v in versions]


def information_response(settings: Settings) -> Dict[str, Any]:
    """
    Static capability descriptor for ``/information``.

    Supported versions are sorted ascending so the highest declared
    contract version is always last.
    """
    supported = sorted(settings.server_supported_versions, key=cmp_to_key(compare_versions))
    return {
        "SourceIdentifier": settings.source_identifier,
        "ServerSupportedVersions": supported,
        "UnsupportedPackageMatchFields": [],
        "RequiredPackageMatchFields": [],
        "UnsupportedQueryParameters": [],
        "RequiredQueryParameters": [],
        "Authentication": {"AuthenticationType": "none"},
    }
