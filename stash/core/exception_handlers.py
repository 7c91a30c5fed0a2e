"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and storage
exceptions to HTTP status codes. Responses carry only the status and its
standard phrase; details go to the log.
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from stash.domain.exceptions import StashException

logger = logging.getLogger(__name__)

# Map error_code to HTTP status; anything unlisted is a 500.
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "UNAUTHORIZED": 401,
    "UNKNOWN_RESOURCE": 400,
    "ID_SPACE_EXHAUSTED": 503,
    "STORAGE_NOT_FOUND": 404,
    "STORAGE_EXISTS_ERROR": 409,
    "STORAGE_UPLOAD_ERROR": 500,
    "STORAGE_DOWNLOAD_ERROR": 500,
    "STORAGE_DELETE_ERROR": 500,
    "STORAGE_PERMISSION_ERROR": 400,
}


def status_response(status_code: int) -> PlainTextResponse:
    """Bare status response, e.g. 404 'Not Found'."""
    return PlainTextResponse(HTTPStatus(status_code).phrase, status_code=status_code)


def _stash_exception_handler(request: Request, exc: StashException) -> PlainTextResponse:
    """Return the status for exc.error_code; log the details."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 500)
    log = logger.error if status >= 500 else logger.info
    log("%s %s -> %d %s", request.method, request.url.path, status, exc.to_dict())
    return status_response(status)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> PlainTextResponse:
    """Return 400 for malformed requests (e.g. missing file field)."""
    logger.info("%s %s -> 400 %s", request.method, request.url.path, exc.errors())
    return status_response(400)


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> PlainTextResponse:
    """Return Starlette HTTP exceptions (router 404/405) as bare status responses."""
    return status_response(exc.status_code)


def _generic_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Return 500 and log the traceback."""
    logger.exception("Unhandled exception: %s", exc)
    return status_response(500)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: StashException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(StashException, _stash_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
