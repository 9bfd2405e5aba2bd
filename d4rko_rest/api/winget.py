from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from d4rko_rest.api.responses import data_response
from d4rko_rest.core.config import Settings
from d4rko_rest.core.dependencies import get_manifest_source, get_settings
from d4rko_rest.domain import shaping
from d4rko_rest.domain.errors import ManifestNotFoundError, NotFoundError
from d4rko_rest.domain.models import ManifestSearchRequest, PackageDocument
from d4rko_rest.domain.search import matches_search
from d4rko_rest.services.upstream import ManifestSource

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_package(package_id: str, settings: Settings) -> None:
    if package_id.lower() != settings.package_identifier.lower():
        raise NotFoundError("Unknown PackageIdentifier")


async def _load_version(source: ManifestSource, version: str) -> PackageDocument:
    try:
        return await source.load_manifest(version)
    except ManifestNotFoundError:
        raise NotFoundError("Version not found")


# ---------------------------------------------------------------------------
# 1. GET / and GET /information
# ---------------------------------------------------------------------------

@router.get("/")
@router.get("/information")
async def get_information(settings: Settings = Depends(get_settings)) -> JSONResponse:
    """
    WinGet REST source `/information` endpoint.
    """
    return data_response(shaping.information_response(settings), settings)


# ---------------------------------------------------------------------------
# 2. POST /manifestSearch
# ---------------------------------------------------------------------------

@router.api_route("/manifestSearch", methods=["GET", "POST"])
async def manifest_search(
    request: Request,
    settings: Settings = Depends(get_settings),
    source: ManifestSource = Depends(get_manifest_source),
) -> JSONResponse:
    """
    WinGet REST `/manifestSearch` endpoint.

    An unreadable body is treated as an empty query. A GitHub rate limit
    surfaces as zero versions, i.e. an empty result.
    """
    raw = await request.body()
    try:
        body = ManifestSearchRequest.model_validate_json(raw)
    except ValidationError:
        logger.debug("Unparseable manifestSearch body; using an empty query")
        body = ManifestSearchRequest()

    versions = await source.list_versions()
    if not versions:
        return data_response([], settings)

    documents = await source.load_manifests(versions)
    if not matches_search(body, documents, settings):
        return data_response([], settings)

    package_name = documents[0].PackageName or settings.default_package_name
    results = shaping.search_result(versions, package_name, settings)
    if body.MaximumResults is not None and body.MaximumResults > 0:
        results = results[: body.MaximumResults]
    return data_response(results, settings)


# ---------------------------------------------------------------------------
# 3. GET /packageManifests[/{PackageIdentifier}]
# ---------------------------------------------------------------------------

@router.get("/packageManifests")
async def list_package_manifests(
    settings: Settings = Depends(get_settings),
    source: ManifestSource = Depends(get_manifest_source),
) -> JSONResponse:
    versions = await source.list_versions()
    documents = await source.load_manifests(versions)
    return data_response(shaping.manifest_multiple(documents, settings), settings)


@router.get("/packageManifests/{package_id}")
async def get_package_manifests(
    package_id: str,
    Version: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    source: ManifestSource = Depends(get_manifest_source),
) -> JSONResponse:
    """
    WinGet REST `/packageManifests/{PackageIdentifier}` endpoint.

    The optional `Version` query parameter narrows the manifest to one version.
    """
    _require_package(package_id, settings)

    versions = await source.list_versions()
    if not versions:
        raise NotFoundError("No versions available")

    if Version is not None:
        if Version not in versions:
            raise NotFoundError("Version not found")
        versions = [Version]

    documents = await source.load_manifests(versions)
    data = shaping.manifest_single(settings.package_identifier, documents, settings)
    return data_response(data, settings)


# ---------------------------------------------------------------------------
# 4. GET /packages/...
# ---------------------------------------------------------------------------

@router.get("/packages")
async def list_packages(settings: Settings = Depends(get_settings)) -> JSONResponse:
    return data_response([shaping.package_record(settings)], settings)


@router.get("/packages/{package_id}")
async def get_package(package_id: str, settings: Settings = Depends(get_settings)) -> JSONResponse:
    _require_package(package_id, settings)
    return data_response(shaping.package_record(settings), settings)


@router.get("/packages/{package_id}/versions")
async def list_package_versions(
    package_id: str,
    settings: Settings = Depends(get_settings),
    source: ManifestSource = Depends(get_manifest_source),
) -> JSONResponse:
    _require_package(package_id, settings)
    versions = await source.list_versions()
    return data_response(shaping.version_list(versions), settings)


@router.get("/packages/{package_id}/versions/{version}")
async def get_package_version(
    package_id: str,
    version: str,
    settings: Settings = Depends(get_settings),
    source: ManifestSource = Depends(get_manifest_source),
) -> JSONResponse:
    _require_package(package_id, settings)
    doc = await _load_version(source, version)
    return data_response(shaping.version_detail(doc, settings), settings)


@router.get("/packages/{package_id}/versions/{version}/installers")
async def list_version_installers(
    package_id: str,
    version: str,
    settings: Settings = Depends(get_settings),
    source: ManifestSource = Depends(get_manifest_source),
) -> JSONResponse:
    _require_package(package_id, settings)
    doc = await _load_version(source, version)
    return data_response(shaping.to_installers(doc), settings)


@router.get("/packages/{package_id}/versions/{version}/locales")
async def list_version_locales(
    package_id: str,
    version: str,
    settings: Settings = Depends(get_settings),
    source: ManifestSource = Depends(get_manifest_source),
) -> JSONResponse:
    _require_package(package_id, settings)
    doc = await _load_version(source, version)
    return data_response(shaping.to_locales(doc, settings) or [], settings)
