import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from d4rko_rest import __version__
from d4rko_rest.api.responses import error_response
from d4rko_rest.api.winget import router as winget_router
from d4rko_rest.core.config import Settings, get_log_level
from d4rko_rest.core.dependencies import get_settings
from d4rko_rest.domain.errors import ApiError
from d4rko_rest.domain.winget_utils import normalize_path

# Configure logging
logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="D4RKO winget REST source",
    version=__version__,
    description="Read-only WinGet REST source serving d4rko.mpv from singleton manifests on GitHub.",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return {"status": "ok"}


app.include_router(winget_router, tags=["winget"])


# ---------------------------------------------------------------------------
# Error envelopes
# ---------------------------------------------------------------------------

def _settings_for(request: Request) -> Settings:
    """Settings as the route handlers see them, honouring dependency overrides."""
    provider = request.app.dependency_overrides.get(get_settings, get_settings)
    return provider()


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> Response:
    return error_response(exc.error_code, exc.message, exc.status_code, _settings_for(request))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    # Unknown paths and unsupported methods both fall through to NotFound.
    if exc.status_code in (404, 405):
        return error_response("NotFound", "Not Found", 404, _settings_for(request))
    if exc.status_code == 400:
        return error_response("BadRequest", str(exc.detail), 400, _settings_for(request))
    return error_response("ServerError", str(exc.detail), exc.status_code, _settings_for(request))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    return error_response("BadRequest", "Bad Request", 400, _settings_for(request))


# ---------------------------------------------------------------------------
# Request normalisation and the top-level error boundary
# ---------------------------------------------------------------------------

@app.middleware("http")
async def normalize_request(request: Request, call_next) -> Response:
    """
    Route every client protocol convention to the same handlers.

    `/api`, `/v1.9` and trailing slashes are stripped before routing and
    HEAD is served as GET with the body dropped. Any exception that escapes
    a handler is turned into a 500 ServerError envelope here.
    """
    is_head = request.method == "HEAD"
    request.scope["path"] = normalize_path(request.scope["path"])
    if is_head:
        request.scope["method"] = "GET"

    try:
        response = await call_next(request)
    except Exception as e:
        logger.exception(f"Unhandled error serving {request.method} {request.url.path}: {e}")
        response = error_response("ServerError", str(e), 500, _settings_for(request))

    if is_head:
        body_iterator = getattr(response, "body_iterator", None)
        if body_iterator is not None:
            async for _ in body_iterator:
                pass
        return Response(status_code=response.status_code, headers=dict(response.headers))
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "d4rko_rest.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
