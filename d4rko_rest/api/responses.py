"""
JSON response helpers shared by every WinGet endpoint.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from fastapi.responses import JSONResponse

from d4rko_rest.core.config import Settings


def merge_headers(base: Mapping[str, str], overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Ordered header merge: base headers first, overrides win on conflict.

    Names are compared case-insensitively and emitted lower-cased.
    """
    merged: Dict[str, str] = {k.lower(): v for k, v in base.items()}
    for k, v in (overrides or {}).items():
        merged[k.lower()] = v
    return merged


def base_headers(settings: Settings) -> Dict[str, str]:
    return {
        "content-type": "application/json",
        "cache-control": settings.cache_control,
    }


def json_response(
    content: Any,
    settings: Settings,
    status_code: int = 200,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        content=content,
        status_code=status_code,
        headers=merge_headers(base_headers(settings), headers),
    )


def data_response(data: Any, settings: Settings) -> JSONResponse:
    return json_response({"Data": data}, settings)


def error_response(error_code: str, message: str, status_code: int, settings: Settings) -> JSONResponse:
    return json_response({"ErrorCode": error_code, "Message": message}, settings, status_code=status_code)
