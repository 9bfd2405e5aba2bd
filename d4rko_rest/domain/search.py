"""
Keyword matching for ``POST /manifestSearch``.

The source serves a single package, so matching answers one question: does
the package (as described by all of its loaded versions) satisfy the request?
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from d4rko_rest.core.config import Settings
from d4rko_rest.domain.models import (
    ManifestSearchRequest,
    PackageDocument,
    PackageMatchFilter,
    RequestMatch,
)
from d4rko_rest.domain.winget_utils import match_text


def values_for_field(field: str, documents: Sequence[PackageDocument], settings: Settings) -> List[str]:
    field = field or ""

    if field == "PackageIdentifier":
        return [settings.package_identifier]
    if field == "PackageName":
        return [doc.PackageName or settings.default_package_name for doc in documents]
    if field == "Publisher":
        return [settings.publisher] + [doc.Publisher for doc in documents if doc.Publisher]
    if field == "Moniker":
        return [doc.Moniker for doc in documents if doc.Moniker]
    if field == "Tag":
        return [tag for doc in documents for tag in (doc.Tags or [])]
    return []


def _matches_filter(flt: PackageMatchFilter, documents: Sequence[PackageDocument], settings: Settings) -> bool:
    if not flt.Match:
        return True
    keyword = flt.Match.KeyWord or ""
    values = values_for_field(flt.PackageMatchField, documents, settings)
    return any(match_text(str(v), keyword, flt.Match.MatchType) for v in values)


def _matches_query(query: RequestMatch, documents: Sequence[PackageDocument], settings: Settings) -> bool:
    candidates: List[str] = []
    for field in ("PackageIdentifier", "PackageName", "Publisher", "Moniker", "Tag"):
        candidates.extend(values_for_field(field, documents, settings))
    return any(match_text(str(value), query.KeyWord, query.MatchType) for value in candidates)


def matches_search(
    body: ManifestSearchRequest,
    documents: Sequence[PackageDocument],
    settings: Settings,
) -> bool:
    """
    Evaluate Query/Inclusions/Filters against the package's manifests.
    """
    query: Optional[RequestMatch] = body.Query if body.Query and body.Query.KeyWord else None
    inclusions = body.Inclusions or []

    if body.FetchAllManifests or (query is None and not inclusions):
        candidate = True
    else:
        candidate = (query is not None and _matches_query(query, documents, settings)) or any(
            _matches_filter(inc, documents, settings) for inc in inclusions
        )

    if not candidate:
        return False
    return all(_matches_filter(flt, documents, settings) for flt in body.Filters or [])
