"""
Error taxonomy for the WinGet REST source.

``ApiError`` subclasses are rendered as ``{ErrorCode, Message}`` envelopes.
``UpstreamError`` describes a failed GitHub call; unless a handler translates
it, it reaches the top-level boundary and becomes a 500 ServerError.
"""

from __future__ import annotations

from typing import Optional


class ApiError(Exception):
    status_code = 500
    error_code = "ServerError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ApiError):
    status_code = 404
    error_code = "NotFound"

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)


class BadRequestError(ApiError):
    status_code = 400
    error_code = "BadRequest"

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class UpstreamError(Exception):
    """A non-success response from the GitHub contents API or raw host."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ManifestNotFoundError(UpstreamError):
    """The raw singleton manifest for a version could not be fetched."""

    def __init__(self, version: str, status_code: Optional[int] = None):
        super().__init__(f"RAW not found for {version}: {status_code}", status_code)
        self.version = version
