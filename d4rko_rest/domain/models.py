"""
Pydantic models for singleton manifests and WinGet search requests.

Field names follow the WinGet manifest and REST contracts (PascalCase) so
parsed YAML documents and request bodies validate without aliasing. Every
optional manifest field defaults to ``None``, which means "absent upstream";
an empty list or string is a present value and is kept as such.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Singleton manifest models
# ---------------------------------------------------------------------------
# YAML turns unquoted values such as ``1.2`` into floats; numbers are coerced
# back to strings so versions and identifiers stay textual.


class NestedInstallerFile(BaseModel):
    """
    A file inside a zip installer that WinGet extracts and runs or links.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    RelativeFilePath: str
    PortableCommandAlias: Optional[str] = None


class InstallerEntry(BaseModel):
    """
    One entry of a manifest's ``Installers`` list.

    InstallerType and the nested installer fields fall back to the
    document-level values when absent here.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    Architecture: Optional[str] = None
    InstallerSha256: Optional[str] = None
    InstallerUrl: Optional[str] = None
    InstallerType: Optional[str] = None
    NestedInstallerType: Optional[str] = None
    NestedInstallerFiles: Optional[List[NestedInstallerFile]] = None
    Scope: Optional[str] = None
    InstallerLocale: Optional[str] = None


class PackageDocument(BaseModel):
    """
    A parsed singleton manifest describing exactly one package version.

    Only identifier and version are required. Documents live for a single
    request and are never persisted.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    PackageIdentifier: str
    PackageVersion: str

    PackageLocale: Optional[str] = None
    PackageName: Optional[str] = None
    Publisher: Optional[str] = None
    PublisherUrl: Optional[str] = None
    PublisherSupportUrl: Optional[str] = None
    PrivacyUrl: Optional[str] = None
    Author: Optional[str] = None
    PackageUrl: Optional[str] = None
    License: Optional[str] = None
    LicenseUrl: Optional[str] = None
    Copyright: Optional[str] = None
    CopyrightUrl: Optional[str] = None
    ShortDescription: Optional[str] = None
    Description: Optional[str] = None
    Moniker: Optional[str] = None
    Tags: Optional[List[str]] = None
    ReleaseNotes: Optional[str] = None
    ReleaseNotesUrl: Optional[str] = None

    InstallerType: Optional[str] = None
    NestedInstallerType: Optional[str] = None
    NestedInstallerFiles: Optional[List[NestedInstallerFile]] = None
    Installers: Optional[List[InstallerEntry]] = None


# ---------------------------------------------------------------------------
# WinGet API Request Models
# ---------------------------------------------------------------------------


class RequestMatch(BaseModel):
    """
    Keyword plus match type, used by Query, Inclusions and Filters.
    """

    KeyWord: Optional[str] = Field(
        default=None,
        description="Search keyword to match against package fields.",
    )
    MatchType: Optional[str] = Field(
        default=None,
        description="Type of matching to perform (e.g., 'Exact', 'CaseInsensitive', 'Substring').",
    )


class PackageMatchFilter(BaseModel):
    """
    Field-specific criterion used in Inclusions and Filters.
    """

    model_config = ConfigDict(populate_by_name=True)

    PackageMatchField: str = Field(
        description="Field to match against (e.g., 'PackageName', 'Tag', 'Moniker').",
    )
    Match: Optional[RequestMatch] = Field(
        default=None,
        alias="RequestMatch",
        description="Keyword and match type applied to the named field.",
    )


class ManifestSearchRequest(BaseModel):
    """
    Request body of ``POST /manifestSearch``.

    A package is a candidate when FetchAllManifests is set, when the Query
    matches, or when any Inclusion matches; with no criteria at all every
    package is a candidate. Candidates must then match ALL Filters.
    """

    MaximumResults: Optional[int] = Field(
        default=None,
        description="Maximum number of results to return.",
    )
    FetchAllManifests: Optional[bool] = Field(
        default=None,
        description="If True, match regardless of Query/Inclusions.",
    )
    Query: Optional[RequestMatch] = Field(
        default=None,
        description="Keyword matched against identifier, name, publisher, moniker and tags.",
    )
    Inclusions: Optional[List[PackageMatchFilter]] = Field(
        default_factory=list,
        description="Packages matching ANY inclusion become candidates.",
    )
    Filters: Optional[List[PackageMatchFilter]] = Field(
        default_factory=list,
        description="Candidates must match ALL filters.",
    )
